"""
Pricing rule import from CSV / Excel spreadsheets.

Handles:
- Flexible column names (English headers, common abbreviations)
- Unit types referenced by name or id; blank means "all unit types"
- Weekday filters written as numbers (0=Mon) or day names
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from dateutil import parser as date_parser
from django.core.exceptions import ValidationError
from django.db import transaction

logger = logging.getLogger(__name__)


class PricingRuleImportService:
    """
    Import pricing rules (seasons, weekend uplifts, promotions) from a file.

    Usage:
        service = PricingRuleImportService()
        result = service.import_file('/path/to/seasons.xlsx')

        # Check the file without writing anything
        result = service.import_file('/path/to/seasons.csv', validate_only=True)
    """

    DEFAULT_COLUMN_MAPPING = {
        'name': ['Name', 'Rule', 'Rule Name', 'Season', 'Description'],
        'unit_type': ['Unit Type', 'UnitType', 'Room Type', 'RoomType', 'Type'],
        'rule_type': ['Rule Type', 'RuleType', 'Kind', 'Adjustment'],
        'value': ['Value', 'Price', 'Rate', 'Amount', 'Multiplier'],
        'start_date': ['Start Date', 'Start', 'From', 'Date From', 'Valid From'],
        'end_date': ['End Date', 'End', 'To', 'Date To', 'Valid To', 'Until'],
        'priority': ['Priority', 'Rank'],
        'days_of_week': ['Days of Week', 'Days', 'Weekdays', 'DOW'],
        'active': ['Active', 'Enabled', 'Is Active'],
    }

    REQUIRED_COLUMNS = {'name', 'value', 'start_date', 'end_date'}

    DAY_ALIASES = {
        'mon': 0, 'monday': 0,
        'tue': 1, 'tues': 1, 'tuesday': 1,
        'wed': 2, 'wednesday': 2,
        'thu': 3, 'thur': 3, 'thurs': 3, 'thursday': 3,
        'fri': 4, 'friday': 4,
        'sat': 5, 'saturday': 5,
        'sun': 6, 'sunday': 6,
    }

    RULE_TYPE_ALIASES = {
        'fixed': 'fixed', 'price': 'fixed', 'override': 'fixed',
        'multiplier': 'multiplier', 'factor': 'multiplier',
        'amount': 'amount', 'adjustment': 'amount', 'delta': 'amount',
    }

    TRUE_VALUES = {'1', 'true', 'yes', 'y', 'active'}
    FALSE_VALUES = {'0', 'false', 'no', 'n', 'inactive'}

    def __init__(self, column_mapping: Optional[Dict] = None):
        self.column_mapping = column_mapping or self.DEFAULT_COLUMN_MAPPING
        self.errors: List[Dict] = []
        self.stats = {
            'rows_total': 0,
            'rows_created': 0,
            'rows_skipped': 0,
        }
        self._unit_types = None

    # =========================================================================
    # PUBLIC
    # =========================================================================

    def import_file(self, file_path, validate_only: bool = False) -> Dict:
        """
        Import pricing rules from a file.

        Args:
            file_path: Path to Excel or CSV file
            validate_only: Parse and validate every row but create nothing

        Returns:
            Dict with rows_total, rows_created, rows_skipped and errors
        """
        from lodging.models import PricingRule

        file_path = Path(file_path)

        if not file_path.exists():
            self.errors.append({'row': 0, 'message': f'File not found: {file_path}'})
            return self._build_result(file_path, validate_only)

        df = self._read_file(file_path)
        if df is None or df.empty:
            self.errors.append({'row': 0, 'message': 'File is empty or could not be read'})
            return self._build_result(file_path, validate_only)

        df = self._map_columns(df)
        missing = self.REQUIRED_COLUMNS - set(df.columns)
        if missing:
            self.errors.append({
                'row': 0,
                'message': 'Missing required columns: ' + ', '.join(sorted(missing)),
            })
            return self._build_result(file_path, validate_only)

        self.stats['rows_total'] = len(df)

        rules = []
        for idx, row in df.iterrows():
            # Header is row 1 in the source file
            row_num = idx + 2
            try:
                rule = self._build_rule(row)
                rule.full_clean(exclude=['unit_type'])
            except ValidationError as e:
                self._skip(row_num, '; '.join(e.messages))
                continue
            except ValueError as e:
                self._skip(row_num, str(e))
                continue
            rules.append(rule)

        if not validate_only and rules:
            with transaction.atomic():
                PricingRule.objects.bulk_create(rules)
            self.stats['rows_created'] = len(rules)
            logger.info("Imported %s pricing rules from %s", len(rules), file_path.name)
        elif validate_only:
            logger.info("Validated %s: %s valid rows", file_path.name, len(rules))

        return self._build_result(file_path, validate_only, valid_rows=len(rules))

    # =========================================================================
    # FILE READING
    # =========================================================================

    def _read_file(self, file_path: Path) -> Optional[pd.DataFrame]:
        """Read Excel or CSV file into DataFrame, every cell as text."""
        suffix = file_path.suffix.lower()

        if suffix in ['.xlsx', '.xls']:
            return pd.read_excel(file_path, dtype=str)

        if suffix == '.csv':
            for encoding in ['utf-8', 'latin1']:
                try:
                    return pd.read_csv(file_path, encoding=encoding, dtype=str, index_col=False)
                except UnicodeDecodeError:
                    continue
            return None

        self.errors.append({'row': 0, 'message': f'Unsupported file type: {suffix}'})
        return None

    def _map_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        """Map source columns to standard column names."""
        column_map = {}
        df.columns = [str(col).strip() for col in df.columns]

        for standard_name, possible_names in self.column_mapping.items():
            candidates = [standard_name] + [name.lower() for name in possible_names]
            for col in df.columns:
                if col.lower() in candidates:
                    column_map[col] = standard_name
                    break

        return df.rename(columns=column_map)

    # =========================================================================
    # ROW PARSING
    # =========================================================================

    def _build_rule(self, row: pd.Series):
        from lodging.models import PricingRule

        name = self._cell(row, 'name')
        if not name:
            raise ValueError('Missing rule name')

        rule_type = self._parse_rule_type(self._cell(row, 'rule_type'))
        priority = self._cell(row, 'priority')

        return PricingRule(
            name=name[:100],
            unit_type=self._resolve_unit_type(self._cell(row, 'unit_type')),
            rule_type=rule_type,
            value=self._parse_decimal(self._cell(row, 'value'), 'value'),
            start_date=self._parse_date(self._cell(row, 'start_date'), 'start_date'),
            end_date=self._parse_date(self._cell(row, 'end_date'), 'end_date'),
            days_of_week=self._parse_days(self._cell(row, 'days_of_week')),
            priority=int(self._parse_decimal(priority, 'priority')) if priority else 50,
            active=self._parse_bool(self._cell(row, 'active')),
        )

    def _cell(self, row: pd.Series, column: str) -> str:
        if column not in row.index:
            return ''
        value = row[column]
        if pd.isna(value):
            return ''
        return str(value).strip()

    def _resolve_unit_type(self, value: str):
        """Unit type by id or case-insensitive name. Blank means all types."""
        if not value:
            return None

        if self._unit_types is None:
            from lodging.models import UnitType
            self._unit_types = list(UnitType.objects.all())

        for unit_type in self._unit_types:
            if value.isdigit() and unit_type.pk == int(value):
                return unit_type
            if unit_type.name.lower() == value.lower():
                return unit_type

        raise ValueError(f'Unknown unit type: {value}')

    def _parse_rule_type(self, value: str) -> str:
        if not value:
            return 'fixed'
        rule_type = self.RULE_TYPE_ALIASES.get(value.lower())
        if rule_type is None:
            raise ValueError(f'Unknown rule type: {value}')
        return rule_type

    def _parse_decimal(self, value: str, field: str) -> Decimal:
        try:
            return Decimal(value.replace(',', ''))
        except (InvalidOperation, AttributeError):
            raise ValueError(f'Invalid {field}: {value!r}')

    def _parse_date(self, value: str, field: str) -> date:
        if not value:
            raise ValueError(f'Missing {field}')
        try:
            return date_parser.parse(value).date()
        except (ValueError, OverflowError):
            raise ValueError(f'Invalid {field}: {value!r}')

    def _parse_days(self, value: str) -> List[int]:
        if not value:
            return []

        days = []
        for part in value.replace(';', ',').replace('|', ',').split(','):
            part = part.strip().lower()
            if not part:
                continue
            if part.isdigit():
                day = int(part)
            elif part in self.DAY_ALIASES:
                day = self.DAY_ALIASES[part]
            else:
                raise ValueError(f'Invalid day of week: {part!r}')
            if day not in days:
                days.append(day)
        return sorted(days)

    def _parse_bool(self, value: str) -> bool:
        if not value:
            return True
        lowered = value.lower()
        if lowered in self.TRUE_VALUES:
            return True
        if lowered in self.FALSE_VALUES:
            return False
        raise ValueError(f'Invalid active flag: {value!r}')

    # =========================================================================
    # RESULTS
    # =========================================================================

    def _skip(self, row_num: int, message: str):
        self.stats['rows_skipped'] += 1
        self.errors.append({'row': row_num, 'message': message})

    def _build_result(self, file_path: Path, validate_only: bool, valid_rows: int = 0) -> Dict:
        """Build result dictionary."""
        return {
            'success': not any(e['row'] == 0 for e in self.errors),
            'filename': file_path.name,
            'validate_only': validate_only,
            'rows_total': self.stats['rows_total'],
            'rows_valid': valid_rows,
            'rows_created': self.stats['rows_created'],
            'rows_skipped': self.stats['rows_skipped'],
            'errors': self.errors,
        }
