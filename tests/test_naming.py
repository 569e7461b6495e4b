import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "packages" / "core_engine" / "src"))

from gen_core.naming import (
    fmt_field_name,
    format_field_name,
    singular,
    split_words,
    stringify_first_char,
    to_camel,
    to_lower_camel,
    to_snake,
)


class TestSplitWords(unittest.TestCase):

    def test_snake_case(self):
        self.assertEqual(split_words("created_at"), ["created", "at"])

    def test_camel_case_with_initialism(self):
        self.assertEqual(split_words("HTTPServer"), ["HTTP", "Server"])
        self.assertEqual(split_words("UserID"), ["User", "ID"])

    def test_separators(self):
        self.assertEqual(split_words("order-line item"), ["order", "line", "item"])


class TestCasing(unittest.TestCase):

    def test_to_snake(self):
        self.assertEqual(to_snake("createdAt"), "created_at")
        self.assertEqual(to_snake("UserID"), "user_id")

    def test_to_camel(self):
        self.assertEqual(to_camel("created_at"), "CreatedAt")

    def test_to_lower_camel(self):
        self.assertEqual(to_lower_camel("created_at"), "createdAt")

    def test_format_field_name(self):
        self.assertEqual(format_field_name("snake", "CreatedAt"), "created_at")
        self.assertEqual(format_field_name("camel", "created_at"), "CreatedAt")
        self.assertEqual(format_field_name("lower_camel", "created_at"), "createdAt")
        self.assertEqual(format_field_name("none", "User_Id"), "User_Id")


class TestFieldNames(unittest.TestCase):

    def test_initialisms_stay_upper(self):
        self.assertEqual(fmt_field_name("user_id"), "UserID")
        self.assertEqual(fmt_field_name("User_Id"), "UserID")
        self.assertEqual(fmt_field_name("api_url"), "APIURL")

    def test_leading_digit_is_spelled_out(self):
        self.assertEqual(stringify_first_char("2fa_code"), "two_fa_code")
        self.assertEqual(fmt_field_name("2fa_code"), "TwoFaCode")

    def test_empty_name(self):
        self.assertEqual(fmt_field_name(""), "Field")
        self.assertEqual(fmt_field_name("__"), "Field")


class TestSingular(unittest.TestCase):

    def test_plural_forms(self):
        self.assertEqual(singular("Orders"), "Order")
        self.assertEqual(singular("Categories"), "Category")
        self.assertEqual(singular("Addresses"), "Address")
        self.assertEqual(singular("Boxes"), "Box")
        self.assertEqual(singular("Batches"), "Batch")

    def test_words_left_alone(self):
        self.assertEqual(singular("Status"), "Status")
        self.assertEqual(singular("Access"), "Access")
        self.assertEqual(singular("Analysis"), "Analysis")
        self.assertEqual(singular("UserID"), "UserID")


if __name__ == "__main__":
    unittest.main()
