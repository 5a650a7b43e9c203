from __future__ import annotations

import stat
import unittest

from fad.config.models import Settings
from fad.fs.filtering import IgnoreRuleError, IgnoreRules
from fad.fs.types import VALID_CODES_TEXT, FileType, classify_mode


def _rules(**fields: str) -> IgnoreRules:
    data = {"ignore_bases": "", "ignore_types": ""}
    data.update(fields)
    return IgnoreRules.compile(Settings.model_validate(data))


class IgnoreRulesTests(unittest.TestCase):
    def test_first_matching_rule_label(self) -> None:
        rules = _rules(
            ignore_bases=".profile,.ds_store,.bashrc",
            ignore_contains="/pkg/mod/,tmp",
            ignore_regexes=r".*\/Library\/.*Mobile.*\/",
            ignore_globs="*.pyc",
        )
        cases = [
            ("/home/user/.bashrc", "bases"),
            ("/home/user/.profile", "bases"),
            ("/home/user/.ds_store", "bases"),
            ("/pkg/mod/cache/download", "contains"),
            ("/var/TMP/testfile.gz", "contains"),
            ("~/Library/Mobile Documents/phone.txt", "regexes"),
            ("/src/module.pyc", "globs"),
            ("/home/user/notes.txt", None),
        ]
        for path, expected in cases:
            with self.subTest(path=path):
                self.assertEqual(rules.ignored_by_path(path), expected)

    def test_bases_are_exact_and_case_sensitive(self) -> None:
        rules = _rules(ignore_bases=".profile,.DS_Store:cache")
        self.assertTrue(rules.matches_bases("/home/user/.profile"))
        self.assertFalse(rules.matches_bases("/home/user/.bashrc"))
        self.assertFalse(rules.matches_bases("/home/user/.ds_store"))

    def test_contains_is_case_insensitive(self) -> None:
        rules = _rules(ignore_contains=".bashr,/go/pkg/mod/,s_sto")
        self.assertFalse(rules.matches_contains(".profile"))
        self.assertTrue(rules.matches_contains("/home/fad/.bashrc"))
        self.assertTrue(rules.matches_contains("/home/fad/Desktop/.DS_Store"))
        self.assertTrue(rules.matches_contains("/home/fad/go/pkg/mod/cache/download/x@v0.6.0"))

    def test_regexes_search_anywhere(self) -> None:
        rules = _rules(ignore_regexes=r".*profile$,\.bashrc$,.*\/go\/pkg\/.*")
        self.assertTrue(rules.matches_regexes(".profile"))
        self.assertFalse(rules.matches_regexes(".profile/no"))
        self.assertTrue(rules.matches_regexes("/home/fad/.bashrc"))
        self.assertFalse(rules.matches_regexes("/home/fad/Desktop/.DS_Store"))
        self.assertTrue(rules.matches_regexes("/home/fad/go/pkg/mod/text@v0.14.0"))

    def test_bad_regex_is_rejected(self) -> None:
        with self.assertRaises(IgnoreRuleError) as ctx:
            _rules(ignore_regexes=".*,data\\,^dog$")
        self.assertIn("does not compile", str(ctx.exception))

    def test_types(self) -> None:
        rules = _rules(ignore_types="d,p")
        self.assertTrue(rules.ignored_by_type(FileType.DIRECTORY))
        self.assertTrue(rules.ignored_by_type(FileType.NAMED_PIPE))
        self.assertFalse(rules.ignored_by_type(FileType.REGULAR))

    def test_empty_rules_ignore_nothing(self) -> None:
        rules = IgnoreRules()
        self.assertIsNone(rules.ignored_by_path("/anything/.git"))
        self.assertFalse(rules.ignored_by_type(FileType.DIRECTORY))


class FileTypeTests(unittest.TestCase):
    def test_classify_mode(self) -> None:
        cases = [
            (stat.S_IFREG | 0o644, FileType.REGULAR),
            (stat.S_IFDIR | 0o755, FileType.DIRECTORY),
            (stat.S_IFLNK | 0o777, FileType.SYMLINK),
            (stat.S_IFBLK, FileType.DEVICE),
            (stat.S_IFCHR, FileType.CHAR_DEVICE),
            (stat.S_IFIFO, FileType.NAMED_PIPE),
            (stat.S_IFSOCK, FileType.SOCKET),
            (0, FileType.UNKNOWN),
        ]
        for mode, expected in cases:
            with self.subTest(mode=oct(mode)):
                self.assertIs(classify_mode(mode), expected)

    def test_codes(self) -> None:
        self.assertIs(FileType.from_code("d"), FileType.DIRECTORY)
        self.assertEqual(FileType.REGULAR.code, "f")
        with self.assertRaises(ValueError):
            FileType.from_code("?")
        with self.assertRaises(ValueError):
            FileType.from_code("l")
        self.assertEqual(VALID_CODES_TEXT, "D,L,S,T,c,d,f or p")


if __name__ == "__main__":
    unittest.main()
