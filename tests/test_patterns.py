"""Tests for the static pattern tables."""

from formguard import patterns


class TestNameTables:
    def test_known_names(self):
        names = patterns.known_names()
        assert {"john", "sarah", "smith", "garcia"} <= names
        assert patterns.known_first_names() <= names
        assert patterns.known_last_names() <= names

    def test_prefixes_are_three_letters(self):
        prefixes = patterns.name_prefixes()
        assert "joh" in prefixes
        assert all(len(p) == 3 for p in prefixes)

    def test_suffixes(self):
        suffixes = patterns.name_suffixes()
        assert "son" in suffixes
        assert "berg" in suffixes

    def test_blacklist(self):
        blacklist = patterns.non_name_blacklist()
        assert {"nerd", "test"} <= blacklist
        assert "john" not in blacklist
        assert "sarah" not in blacklist

    def test_tables_are_lowercase(self):
        for table in (patterns.known_names(), patterns.non_name_blacklist()):
            assert all(entry == entry.lower() for entry in table)


class TestEmailTables:
    def test_disposable(self):
        assert "mailinator.com" in patterns.disposable_domains()

    def test_tlds(self):
        tlds = patterns.legitimate_tlds()
        assert {"com", "org", "io", "de"} <= tlds
        assert "xyz" not in tlds

    def test_providers_are_ordered(self):
        providers = patterns.common_providers()
        assert providers[0] == "gmail"
        assert providers.index("mail") > providers.index("gmail")

    def test_keyboard_patterns(self):
        labels = [rule.label for rule in patterns.keyboard_patterns()]
        assert labels[0] == "qwerty"
        assert "asdf" in labels

    def test_generic_patterns_spare_bare_user(self):
        rules = patterns.generic_username_patterns()
        assert not any(rule.regex.search("user") for rule in rules)
        assert any(rule.regex.search("user42") for rule in rules)


class TestMessageTables:
    def test_spam_keywords(self):
        keywords = patterns.spam_keywords()
        assert "buy now" in keywords
        assert "viagra" in keywords

    def test_text_speak(self):
        pattern = patterns.text_speak_pattern()
        assert pattern.search("can u help plz thanks")
        assert not pattern.search("Can you help, please?")


class TestInjectionFamilies:
    def test_family_order(self):
        names = [f.name for f in patterns.injection_families()]
        assert names == ["sql", "xss", "nosql", "ldap", "command", "path_traversal"]

    def test_family_modes(self):
        assert patterns.injection_family("sql").mode == "any"
        assert patterns.injection_family("ldap").mode == "occurrences"
        assert patterns.injection_family("command").mode == "groups"

    def test_every_family_has_rules_and_threat(self):
        for family in patterns.injection_families():
            assert family.rules
            assert family.threat.endswith("detected")

    def test_cached(self):
        assert patterns.injection_families() is patterns.injection_families()
