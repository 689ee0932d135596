"""netmount - mount declared network shares on their local mount points."""

__version__ = "1.1.0"
PROGRAM_NAME = "netmount"
