""" Unittest TestSuite -> Popcorn Rule Based Parser """
import unittest
import logging
from popcorn_assistant.intent_extractor import rules_based_parser
# set up logging for this test file
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
# logger - query rule based parser
logger = logging.getLogger("TestRulesBasedParser")


# TestSuite - Rules Based Parser
class TestRulesBasedParser(unittest.TestCase):
    """Test suite for rule-based parsing of user text."""

    # test - year range with hyphen
    def test_get_years_from_text_range_hyphen(self):
        """Test year range with hyphen pattern."""
        logger.info(f"Running test_get_years_from_text_range_hyphen")
        self.assertEqual(rules_based_parser.get_years_from_text("action 2005-2010"), (None, 2005, 2010))
        # en dash reads as a hyphen
        self.assertEqual(rules_based_parser.get_years_from_text("dramas 2010–2015"), (None, 2010, 2015))

    # test - year range with between/and
    def test_get_years_from_text_between(self):
        """Test year range with between and pattern."""
        logger.info(f"Running test_get_years_from_text_between")
        self.assertEqual(rules_based_parser.get_years_from_text("between 2001 and 1999 comedy"), (None, 1999, 2001))
        self.assertEqual(rules_based_parser.get_years_from_text("from 2010 to 2015"), (None, 2010, 2015))

    # test - since is inclusive, after is exclusive
    def test_get_years_from_text_lower_bounds(self):
        """Test since/from-onwards keep the year and after starts the year after."""
        logger.info(f"Running test_get_years_from_text_lower_bounds")
        self.assertEqual(rules_based_parser.get_years_from_text("recommend drama since 2012"), (None, 2012, None))
        self.assertEqual(rules_based_parser.get_years_from_text("thrillers after 2015"), (None, 2016, None))
        self.assertEqual(rules_based_parser.get_years_from_text("from 2015 onwards"), (None, 2015, None))

    # test - until is inclusive, before is exclusive
    def test_get_years_from_text_upper_bounds(self):
        """Test until keeps the year and before ends the year before."""
        logger.info(f"Running test_get_years_from_text_upper_bounds")
        self.assertEqual(rules_based_parser.get_years_from_text("westerns before 2000"), (None, None, 1999))
        self.assertEqual(rules_based_parser.get_years_from_text("westerns until 2000"), (None, None, 2000))
        self.assertEqual(rules_based_parser.get_years_from_text("made up to 1985"), (None, None, 1985))

    # test - decades
    def test_get_years_from_text_decades(self):
        """Test decade words map to their ten-year span."""
        logger.info(f"Running test_get_years_from_text_decades")
        self.assertEqual(rules_based_parser.get_years_from_text("movies from the 90s"), (None, 1990, 1999))
        self.assertEqual(rules_based_parser.get_years_from_text("the 1980's"), (None, 1980, 1989))
        self.assertEqual(rules_based_parser.get_years_from_text("2000s horror"), (None, 2000, 2009))

    # test - single year
    def test_get_years_from_text_single(self):
        """Test a single year and a bare 'from YEAR' are exact years."""
        logger.info(f"Running test_get_years_from_text_single")
        self.assertEqual(rules_based_parser.get_years_from_text("movies from 2019"), (2019, None, None))
        self.assertEqual(rules_based_parser.get_years_from_text("show me comedies"), (None, None, None))

    # test - rating phrases
    def test_get_min_rating_from_text(self):
        """Test the supported rating phrasings."""
        logger.info(f"Running test_get_min_rating_from_text")
        self.assertEqual(rules_based_parser.get_min_rating_from_text("rated above 7"), 7.0)
        self.assertEqual(rules_based_parser.get_min_rating_from_text("rating at least 6.5"), 6.5)
        self.assertEqual(rules_based_parser.get_min_rating_from_text("at least 8/10"), 8.0)
        self.assertEqual(rules_based_parser.get_min_rating_from_text("minimum rating 6"), 6.0)
        self.assertEqual(rules_based_parser.get_min_rating_from_text("7+ rating"), 7.0)
        self.assertEqual(rules_based_parser.get_min_rating_from_text("rated 8+"), 8.0)
        self.assertEqual(rules_based_parser.get_min_rating_from_text("highly rated dramas"), 7.5)

    # test - years are never ratings
    def test_get_min_rating_ignores_years(self):
        """Test a year after 'above' or 'rated' is not read as a rating."""
        logger.info(f"Running test_get_min_rating_ignores_years")
        self.assertIsNone(rules_based_parser.get_min_rating_from_text("movies above 2010"))
        self.assertIsNone(rules_based_parser.get_min_rating_from_text("comedies from 2012"))

    # test - media type
    def test_get_media_type_from_text(self):
        """Test tv words switch the media type, plain requests leave it unset."""
        logger.info(f"Running test_get_media_type_from_text")
        self.assertEqual(rules_based_parser.get_media_type_from_text("good tv series"), "tv")
        self.assertEqual(rules_based_parser.get_media_type_from_text("funny sitcoms"), "tv")
        self.assertEqual(rules_based_parser.get_media_type_from_text("old films"), "movie")
        self.assertIsNone(rules_based_parser.get_media_type_from_text("show me comedies"))

    # test - director
    def test_get_director_from_text(self):
        """Test director capture after cue phrases."""
        logger.info(f"Running test_get_director_from_text")
        self.assertEqual(
            rules_based_parser.get_director_from_text("thrillers directed by David Fincher after 2010"),
            "David Fincher")
        self.assertEqual(
            rules_based_parser.get_director_from_text("movies by director denis villeneuve"),
            "Denis Villeneuve")
        self.assertEqual(
            rules_based_parser.get_director_from_text("directed by Christopher Nolan's team"),
            "Christopher Nolan")
        self.assertIsNone(rules_based_parser.get_director_from_text("top rated comedies"))

    # test - actor
    def test_get_actor_from_text(self):
        """Test actor capture after cues and from capitalised names."""
        logger.info(f"Running test_get_actor_from_text")
        self.assertEqual(rules_based_parser.get_actor_from_text("movies starring Tom Hanks from the 90s"), "Tom Hanks")
        self.assertEqual(rules_based_parser.get_actor_from_text("comedies with Jim Carrey"), "Jim Carrey")
        self.assertEqual(rules_based_parser.get_actor_from_text("I loved Meryl Streep in that one"), "Meryl Streep")
        # a lower-case phrase after a weak cue is not a name
        self.assertIsNone(rules_based_parser.get_actor_from_text("movies with high ratings"))

    # test - the full parser
    def test_user_query_parser_full(self):
        """Test the full parser output for a rich utterance."""
        logger.info(f"Running test_user_query_parser_full")
        out = rules_based_parser.user_query_parser("Sci-fi movies from the 90s with Keanu Reeves rated above 7")
        self.assertEqual(out, {
            "year_after": 1990,
            "year_before": 1999,
            "min_rating": 7.0,
            "genre": "science fiction",
            "media_type": "movie",
            "actor": "Keanu Reeves",})

    # test - director and actor together
    def test_user_query_parser_director_and_actor(self):
        """Test a director and a different actor in one utterance."""
        logger.info(f"Running test_user_query_parser_director_and_actor")
        out = rules_based_parser.user_query_parser("a thriller directed by David Fincher starring Brad Pitt")
        self.assertEqual(out["director"], "David Fincher")
        self.assertEqual(out["actor"], "Brad Pitt")
        self.assertEqual(out["genre"], "thriller")

    # test - anything in, dict out
    def test_user_query_parser_never_raises(self):
        """Test empty and odd inputs give a dict."""
        logger.info(f"Running test_user_query_parser_never_raises")
        self.assertEqual(rules_based_parser.user_query_parser(None), {})
        self.assertEqual(rules_based_parser.user_query_parser(""), {})
        self.assertIsInstance(rules_based_parser.user_query_parser("!!! ??? 9999-0000 ..."), dict)


# add the standard unittest entry point
if __name__ == "__main__":
    unittest.main(verbosity=2)
