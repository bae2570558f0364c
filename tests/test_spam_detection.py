import unittest

from storefront.spam_detection import detect_spam, validate_origin


class TestDetectSpam(unittest.TestCase):
    def test_keyword(self):
        v = detect_spam("Check crypto investment opportunity now")
        self.assertTrue(v.is_spam)
        self.assertEqual(v.reason, "spam_keyword")

    def test_keyword_case_insensitive(self):
        self.assertEqual(detect_spam("Best CASINO in town").reason, "spam_keyword")

    def test_repeated_characters(self):
        v = detect_spam("aaaaaaaaaaaaaaa")
        self.assertTrue(v.is_spam)
        self.assertEqual(v.reason, "repeated_characters")

    def test_ten_repeats_is_fine_eleven_is_not(self):
        self.assertFalse(detect_spam("x" * 10).is_spam)
        self.assertEqual(detect_spam("x" * 11).reason, "repeated_characters")

    def test_blank_lines_are_not_repeated_characters(self):
        self.assertFalse(detect_spam("Cake for Sofia" + "\n" * 12 + "Thanks so much").is_spam)
        self.assertFalse(detect_spam("line one" + "\r" * 12 + "line two").is_spam)
        self.assertFalse(detect_spam("a" + "\u2028" * 12 + "b").is_spam)

    def test_repeated_spaces_still_count(self):
        self.assertEqual(detect_spam("hello" + " " * 11 + "there").reason, "repeated_characters")

    def test_clean_text(self):
        v = detect_spam("Please deliver by noon, thanks!")
        self.assertFalse(v.is_spam)
        self.assertIsNone(v.reason)
        self.assertEqual(v.as_dict(), {"isSpam": False})

    def test_urls(self):
        two = "see http://a.example and https://b.example"
        self.assertFalse(detect_spam(two).is_spam)
        three = two + " HTTPS://c.example"
        self.assertEqual(detect_spam(three).reason, "too_many_urls")

    def test_url_rule_wins_over_keyword(self):
        text = "crypto http://a.x http://b.x http://c.x"
        self.assertEqual(detect_spam(text).reason, "too_many_urls")


class TestValidateOrigin(unittest.TestCase):
    def test_both_missing(self):
        self.assertFalse(validate_origin(None, None))
        self.assertFalse(validate_origin("", ""))

    def test_production_origin(self):
        self.assertTrue(validate_origin("https://sabordeemociones.com", None))

    def test_referer_only(self):
        self.assertTrue(validate_origin(None, "https://www.sabordeemociones.com/order"))

    def test_localhost(self):
        self.assertTrue(validate_origin("http://localhost:3000", None))

    def test_foreign_origin(self):
        self.assertFalse(validate_origin("https://evil.example", None))

    def test_either_header_may_match(self):
        self.assertTrue(validate_origin("https://evil.example", "https://sabordeemociones.com/"))

    def test_custom_allow_list(self):
        self.assertTrue(validate_origin("https://shop.test", None, ["shop.test"]))
        self.assertFalse(validate_origin("https://sabordeemociones.com", None, ["shop.test"]))


if __name__ == "__main__":
    unittest.main()
