import pytest

from govassist.database.seed import PROCEDURES
from govassist.utils.text import stem_tokens, tokenize


def seeded(slug: str) -> dict:
    return next(p for p in PROCEDURES if p["slug"] == slug)


class TestSeedCatalog:

    def test_nic_tags_match_stemmed_queries(self):
        tags = seeded("apply-new-national-identity-card")["search_tags"]
        stems = stem_tokens(tokenize("National Identity Card"))

        assert stems == ["nation", "ident", "card"]
        assert set(stems) <= set(tags)

    @pytest.mark.parametrize("procedure", PROCEDURES, ids=lambda p: p["slug"])
    def test_tags_are_lowercase_single_terms(self, procedure):
        for tag in procedure["search_tags"]:
            assert tag == tag.lower()
            assert " " not in tag
