""" Unittest TestSuite -> Popcorn TMDB Catalog Client """
import unittest
import logging
from unittest import mock
import requests
from popcorn_assistant.catalog_client.tmdb_client import TMDBClient, CatalogServiceError
# set up logging for this test file
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
# logger - catalog client
logger = logging.getLogger("TestTMDBClient")


def http_response(status_code=200, body=None, bad_json=False):
    """Build a mocked requests response."""
    response = mock.Mock()
    response.status_code = status_code
    if bad_json:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body if body is not None else {}
    return response


# TestSuite - TMDB client
class TestTMDBClient(unittest.TestCase):
    """Request building, retries and error mapping of the catalog client."""

    def setUp(self):
        self.http_session = mock.MagicMock()
        self.client = TMDBClient(
            api_key="test-key",
            http_session=self.http_session,
            max_retries=2,
            backoff_seconds=0.5)
        # no real waiting between retries
        sleep_patcher = mock.patch("popcorn_assistant.catalog_client.tmdb_client.time.sleep")
        self.sleep = sleep_patcher.start()
        self.addCleanup(sleep_patcher.stop)

    # test - discover request shape
    def test_discover_builds_request(self):
        """Discover calls the media path with the page, api key and timeout."""
        logger.info(f"Running test_discover_builds_request")
        self.http_session.get.return_value = http_response(body={"results": [{"id": 1}], "total_pages": 1})
        body = self.client.discover("movie", {"with_genres": "28"}, page=2)
        self.assertEqual(body["results"], [{"id": 1}])
        args, kwargs = self.http_session.get.call_args
        self.assertEqual(args[0], "https://api.themoviedb.org/3/discover/movie")
        self.assertEqual(kwargs["params"], {"with_genres": "28", "page": 2, "api_key": "test-key"})
        self.assertEqual(kwargs["timeout"], 10.0)

    # test - bearer token
    def test_read_access_token_uses_bearer_header(self):
        """A read token goes in the Authorization header, not the query."""
        logger.info(f"Running test_read_access_token_uses_bearer_header")
        http_session = mock.MagicMock()
        client = TMDBClient(api_key="test-key", read_access_token="token", http_session=http_session)
        http_session.headers.update.assert_any_call({"Authorization": "Bearer token"})
        http_session.get.return_value = http_response(body={"results": []})
        client.search_person("Tom Hanks")
        params = http_session.get.call_args.kwargs["params"]
        self.assertNotIn("api_key", params)
        self.assertEqual(params["query"], "Tom Hanks")

    # test - retry on 5xx then success
    def test_retries_transient_status(self):
        """A 503 is retried and the next success is returned."""
        logger.info(f"Running test_retries_transient_status")
        self.http_session.get.side_effect = [
            http_response(503),
            http_response(body={"results": [{"id": 7}]}),]
        self.assertEqual(self.client.top_rated("movie"), [{"id": 7}])
        self.assertEqual(self.http_session.get.call_count, 2)
        self.sleep.assert_called_once_with(0.5)

    # test - exponential backoff then give up
    def test_gives_up_after_retries(self):
        """Retries double the delay and raise once exhausted."""
        logger.info(f"Running test_gives_up_after_retries")
        self.http_session.get.return_value = http_response(429)
        with self.assertRaises(CatalogServiceError) as raised:
            self.client.trending("movie")
        self.assertEqual(raised.exception.status_code, 429)
        self.assertEqual(self.http_session.get.call_count, 3)
        self.assertEqual([call.args[0] for call in self.sleep.call_args_list], [0.5, 1.0])

    # test - connection errors
    def test_connection_error_is_retried(self):
        """Connection errors are retried then raised as CatalogServiceError."""
        logger.info(f"Running test_connection_error_is_retried")
        self.http_session.get.side_effect = requests.exceptions.ConnectionError("down")
        with self.assertRaises(CatalogServiceError):
            self.client.discover("tv", {})
        self.assertEqual(self.http_session.get.call_count, 3)

    # test - client errors are not retried
    def test_not_found_is_not_retried(self):
        """A 404 raises immediately with its status code."""
        logger.info(f"Running test_not_found_is_not_retried")
        self.http_session.get.return_value = http_response(404)
        with self.assertRaises(CatalogServiceError) as raised:
            self.client.details("movie", 999999)
        self.assertEqual(raised.exception.status_code, 404)
        self.assertEqual(self.http_session.get.call_count, 1)

    # test - non JSON body
    def test_non_json_body_raises(self):
        logger.info(f"Running test_non_json_body_raises")
        self.http_session.get.return_value = http_response(bad_json=True)
        with self.assertRaises(CatalogServiceError):
            self.client.discover("movie", {})

    # test - body that is not an object
    def test_non_object_body_raises(self):
        """A JSON array or string body is a catalog failure, not a result."""
        logger.info(f"Running test_non_object_body_raises")
        for body in ([{"id": 1}], "unexpected"):
            self.http_session.get.return_value = http_response(body=body)
            with self.assertRaises(CatalogServiceError):
                self.client.search_person("Tom Hanks")

    # test - results that are not a list
    def test_non_list_results_are_empty(self):
        logger.info(f"Running test_non_list_results_are_empty")
        self.http_session.get.return_value = http_response(body={"results": {"id": 1}})
        self.assertEqual(self.client.search_person("Tom Hanks"), [])
        self.assertEqual(self.client.trending("tv"), [])

    # test - endpoint paths
    def test_endpoint_paths(self):
        """tv upcoming maps to on_the_air and credits to the media credits path."""
        logger.info(f"Running test_endpoint_paths")
        self.http_session.get.return_value = http_response(body={"results": [], "cast": [{"id": 3}]})
        self.client.upcoming("tv")
        self.assertTrue(self.http_session.get.call_args.args[0].endswith("/tv/on_the_air"))
        credits = self.client.person_credits(525, "movie")
        self.assertTrue(self.http_session.get.call_args.args[0].endswith("/person/525/movie_credits"))
        self.assertEqual(credits, {"cast": [{"id": 3}], "crew": []})

    # test - unsupported media type
    def test_unsupported_media_type(self):
        logger.info(f"Running test_unsupported_media_type")
        with self.assertRaises(ValueError):
            self.client.discover("book", {})
        self.http_session.get.assert_not_called()


# add the standard unittest entry point
if __name__ == "__main__":
    unittest.main(verbosity=2)
