"""Target Validator - turns raw config records into MountTargets, fail-closed."""

import logging
import os
from typing import List, Optional, Tuple

from ..core.exceptions import ConfigValidationError, NoTargetsError
from ..models import MountTarget, RawRecord, ValidationIssue

EXPECTED_FIELD_COUNT = 4


def numbered_lines(records: List[RawRecord]) -> List[str]:
    """Render the config file with line numbers, used in the verbose error report."""
    return [f"{record.line_number:3d}: {record.text}" for record in records]


class TargetValidator:
    """Validates every record and refuses to return a partial target list."""

    def validate(self, records: List[RawRecord], source: str = "config file") -> List[MountTarget]:
        """
        Validate all records.

        Raises:
            ConfigValidationError: one or more records are malformed (carries all issues)
            NoTargetsError: the file contains no targets at all
        """
        targets, issues = self.check_records(records)

        if issues:
            logging.error(f"{len(issues)} invalid record(s) in {source}")
            for issue in issues:
                logging.debug(f"Config issue at line {issue}")
            raise ConfigValidationError(issues, numbered_lines(records))

        if not targets:
            logging.error(f"No targets declared in {source}")
            raise NoTargetsError(source)

        logging.debug(f"Validated {len(targets)} target(s) from {source}")
        return targets

    def check_records(
        self, records: List[RawRecord]
    ) -> Tuple[List[MountTarget], List[ValidationIssue]]:
        """Collect targets and issues over the whole file without stopping early."""
        targets: List[MountTarget] = []
        issues: List[ValidationIssue] = []

        for record in records:
            if record.is_ignorable:
                continue

            message = self.check_record(record)
            if message is not None:
                issues.append(ValidationIssue(line=record.line_number, message=message))
                continue

            name, local_path, host, port = record.fields
            targets.append(
                MountTarget(name=name, local_path=local_path, host=host, port=port)
            )

        return targets, issues

    def check_record(self, record: RawRecord) -> Optional[str]:
        """Return the first problem found in a record, or None if it is valid."""
        fields = record.fields
        count = len(fields)

        if count < EXPECTED_FIELD_COUNT:
            return f"field(s) missing expecting {EXPECTED_FIELD_COUNT} fields, seen {count}"
        if count > EXPECTED_FIELD_COUNT:
            return f"too many fields expecting {EXPECTED_FIELD_COUNT} fields, seen {count}"

        # Empty port is rejected here rather than skipped at mount time
        if any(not value for value in fields):
            return f"field(s) missing or empty. Need {EXPECTED_FIELD_COUNT} fields"

        local_path, port = fields[1], fields[3]

        if not os.path.isdir(local_path):
            return f'"{local_path}" mount point is not a dir'

        if not (port.isascii() and port.isdigit()):
            return f'port number empty or not valid: "{port}" not numerical'

        return None
