from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from core.utils import format_cents, sanitize_guest_email, sanitize_guest_text


class SanitizeTestCase(SimpleTestCase):

    def test_html_is_stripped_and_text_truncated(self):
        self.assertEqual(sanitize_guest_text('<b>Maija</b> <script>x</script>Virtanen'), 'Maija xVirtanen')
        self.assertEqual(len(sanitize_guest_text('a' * 500)), 200)
        self.assertEqual(sanitize_guest_text(None), '')

    def test_email_is_normalized(self):
        self.assertEqual(sanitize_guest_email('  Maija@Example.COM '), 'maija@example.com')

    def test_invalid_email_raises(self):
        with self.assertRaises(ValidationError):
            sanitize_guest_email('not-an-email')


class FormatCentsTestCase(SimpleTestCase):

    def test_known_and_unknown_currencies(self):
        self.assertEqual(format_cents(13600, 'EUR'), '€136.00')
        self.assertEqual(format_cents(995, 'SEK'), '9.95 SEK')
