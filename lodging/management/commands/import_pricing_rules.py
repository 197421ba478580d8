"""
Management command to import pricing rules from Excel/CSV files.

Usage:
    python manage.py import_pricing_rules path/to/seasons.xlsx
    python manage.py import_pricing_rules path/to/seasons.csv --validate-only
    python manage.py import_pricing_rules path/to/seasons.csv --verbose
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Import pricing rules (seasons, weekend uplifts, promotions) from Excel or CSV file'

    def add_arguments(self, parser):
        parser.add_argument(
            'file_path',
            type=str,
            help='Path to the Excel or CSV file to import'
        )
        parser.add_argument(
            '--validate-only',
            action='store_true',
            help='Only validate the file without importing'
        )
        parser.add_argument(
            '--verbose',
            action='store_true',
            help='Show every row error'
        )

    def handle(self, *args, **options):
        from lodging.services import PricingRuleImportService

        file_path = Path(options['file_path'])

        if not file_path.exists():
            raise CommandError(f'File not found: {file_path}')

        if file_path.suffix.lower() not in ['.xlsx', '.xls', '.csv']:
            raise CommandError(f'Unsupported file format: {file_path.suffix}')

        validate_only = options['validate_only']
        service = PricingRuleImportService()

        self.stdout.write(f'Processing: {file_path.name}')
        self.stdout.write('Validating file...' if validate_only else 'Importing pricing rules...')
        self.stdout.write('')

        result = service.import_file(file_path, validate_only=validate_only)

        if not result['success']:
            self.stdout.write(self.style.ERROR('✗ File could not be processed'))
        elif validate_only:
            self.stdout.write(self.style.SUCCESS(f"✓ {result['rows_valid']} valid rows"))
        else:
            self.stdout.write(self.style.SUCCESS('✓ Import completed'))

        self.stdout.write('')
        self.stdout.write('Results:')
        self.stdout.write(f"  Total rows:    {result['rows_total']}")
        if validate_only:
            self.stdout.write(f"  Valid:         {result['rows_valid']}")
        else:
            self.stdout.write(self.style.SUCCESS(f"  Created:       {result['rows_created']}"))
        self.stdout.write(f"  Skipped:       {result['rows_skipped']}")

        errors = result['errors']
        if errors and (options['verbose'] or len(errors) <= 10):
            self.stdout.write('')
            self.stdout.write(self.style.WARNING(f"Errors ({len(errors)}):"))
            for error in errors:
                self.stdout.write(f"  Row {error.get('row', '?')}: {error.get('message', error)}")
        elif errors:
            self.stdout.write('')
            self.stdout.write(self.style.WARNING(f"{len(errors)} errors (use --verbose to see details)"))

        if not result['success']:
            raise CommandError(errors[0]['message'] if errors else 'Import failed')
