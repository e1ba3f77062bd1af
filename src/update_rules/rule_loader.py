"""Loading of the find/replace rule table.

The rule table is a UTF-8 CSV file with three fields per row:

    kind,find,replace
    LinkUrl,http://old.example/,http://new.example/?x=1
    LinkText,Old label,New label
    ObjectText,Old shape text,New shape text

There is no header row. kind is matched case-insensitively. Fields may be
quoted to carry commas. Bad rows are skipped with a warning rather than
failing the whole load.
"""

import csv
import logging

from .errors import RuleFileError, RuleParseError
from .models import RuleKind, RuleSet, UpdateRule

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE = "LinkUpdates.csv"


class RuleLoader:
    """Parses a rule table into a RuleSet.

    Example:
        >>> rule_set = RuleLoader.load("LinkUpdates.csv")
        >>> rule_set.link_url["http://old.example/"]
        'http://new.example/?x=1'
    """

    EXPECTED_FIELDS = 3

    @classmethod
    def load(cls, rules_path: str = DEFAULT_RULES_FILE) -> RuleSet:
        """Load rules from a file.

        Raises:
            RuleFileError: If the file is missing or cannot be read
        """
        try:
            with open(rules_path, "r", encoding="utf-8-sig", newline="") as f:
                content = f.read()
        except FileNotFoundError:
            raise RuleFileError(rules_path, "file not found")
        except PermissionError:
            raise RuleFileError(rules_path, "permission denied")
        except (OSError, UnicodeDecodeError) as e:
            raise RuleFileError(rules_path, str(e))

        return cls.parse(content)

    @classmethod
    def parse(cls, content: str) -> RuleSet:
        """Parse rule table text. Bad rows end up in RuleSet.warnings."""
        rule_set = RuleSet()

        # One rule per physical line, quotes never span lines
        for line_number, line in enumerate(content.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                row = cls._split_line(line_number, line)
                rule = cls._parse_row(line_number, row)
                if not rule_set.add(rule):
                    raise RuleParseError(
                        line_number,
                        ",".join(row),
                        f"duplicate {rule.kind.value} find value, first rule kept",
                    )
            except RuleParseError as e:
                logger.warning(f"Skipping rule: {e}")
                rule_set.warnings.append(str(e))

        logger.info(
            f"Loaded {rule_set.rule_count} rule(s): "
            f"{len(rule_set.object_text)} ObjectText, "
            f"{len(rule_set.link_text)} LinkText, "
            f"{len(rule_set.link_url)} LinkUrl"
        )
        return rule_set

    @classmethod
    def _split_line(cls, line_number: int, line: str) -> list:
        try:
            return next(csv.reader([line]))
        except csv.Error as e:
            raise RuleParseError(line_number, line, f"cannot split fields ({e})")

    @classmethod
    def _parse_row(cls, line_number: int, row: list) -> UpdateRule:
        line = ",".join(row)
        if len(row) != cls.EXPECTED_FIELDS:
            raise RuleParseError(
                line_number,
                line,
                f"expected {cls.EXPECTED_FIELDS} values (type, find, replace), got {len(row)}",
            )

        kind = RuleKind.parse(row[0])
        if kind is None:
            valid = ", ".join(k.value for k in RuleKind)
            raise RuleParseError(line_number, line, f"unknown rule type '{row[0]}' (expected {valid})")

        return UpdateRule(kind=kind, find=row[1], replace=row[2])
