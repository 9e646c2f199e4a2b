from django.test import SimpleTestCase

from academics.services.year_labels import (
    BASELINE_YEARS,
    contains_label,
    first_year,
    is_year_range,
    merge_labels,
    normalize_year_label,
)


class NormalizeYearLabelTests(SimpleTestCase):
    def test_known_forms(self):
        self.assertEqual(normalize_year_label('2024'), 'SY 2024-2025')
        self.assertEqual(normalize_year_label('SY 2021-2022'), 'SY 2021-2022')
        self.assertEqual(normalize_year_label('2021-2022'), 'SY 2021-2022')
        self.assertEqual(normalize_year_label('  sy2023-2024 '), 'SY 2023-2024')
        self.assertEqual(normalize_year_label('Sy 2020'), 'SY 2020-2021')
        self.assertEqual(normalize_year_label('0999'), 'SY 0999-1000')

    def test_unrecognised_is_empty(self):
        for raw in ('garbage', '', None, '20-21', '2024/2025', 'SY', '12345', '9999'):
            self.assertEqual(normalize_year_label(raw), '', raw)

    def test_idempotent(self):
        samples = ['2024', 'SY 2021-2022', 'sy  2020', 'garbage', '', '2019-2020', 'SY SY 2020', '9999', '0000']
        for raw in samples:
            once = normalize_year_label(raw)
            self.assertEqual(normalize_year_label(once), once, raw)

    def test_baseline_labels_are_canonical(self):
        for label in BASELINE_YEARS:
            self.assertEqual(normalize_year_label(label), label)


class LabelHelperTests(SimpleTestCase):
    def test_is_year_range(self):
        self.assertTrue(is_year_range('2025-2026'))
        self.assertTrue(is_year_range(' 2025-2026 '))
        self.assertFalse(is_year_range('SY 2025-2026'))
        self.assertFalse(is_year_range('2025'))

    def test_merge_drops_case_insensitive_repeats(self):
        merged = merge_labels(['SY 2020-2021'], ['sy 2020-2021', 'SY 2025-2026'])
        self.assertEqual(merged, ['SY 2020-2021', 'SY 2025-2026'])
        self.assertTrue(contains_label(merged, 'sy 2025-2026'))

    def test_first_year(self):
        self.assertEqual(first_year('SY 2023-2024'), 2023)
        self.assertEqual(first_year('Unknown'), 0)
