""" Unittest TestSuite -> Popcorn chat client """
import unittest
import logging
from unittest import mock
import requests
import popcorn_chat_client
# set up logging for this test file
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("TestPopcornChatClient")


class TestPopcornChatClient(unittest.TestCase):
    """Rendering and session handling of the console client."""

    def test_format_answer(self):
        logger.info(f"Running test_format_answer")
        text = popcorn_chat_client.format_answer({
            "summary": "Top 2 comedies.",
            "status": "degraded",
            "movies": [
                {"title": "Laugh Two", "release_date": "2013-05-01", "vote_average": 8.1},
                {"title": "Undated", "release_date": None, "vote_average": 6},],})
        self.assertEqual(text.splitlines(), [
            "Top 2 comedies.",
            "  1. Laugh Two (2013) - 8.1",
            "  2. Undated (n/a) - 6.0",
            "  (results may be broader than asked)",])

    def test_send_utterance_keeps_session(self):
        """The session id from the server is used for the next utterance."""
        logger.info(f"Running test_send_utterance_keeps_session")
        http_session = mock.Mock()
        http_session.post.return_value.json.return_value = {"summary": "Top 10 movies.", "movies": [], "session_id": "abc"}
        with mock.patch("builtins.print"):
            session_id = popcorn_chat_client.send_utterance("movies", http_session)
            popcorn_chat_client.send_utterance("only dramas", http_session, session_id)
        self.assertEqual(session_id, "abc")
        self.assertEqual(http_session.post.call_args.kwargs["json"], {"text": "only dramas", "session_id": "abc"})

    def test_send_utterance_request_failure(self):
        logger.info(f"Running test_send_utterance_request_failure")
        http_session = mock.Mock()
        http_session.post.side_effect = requests.exceptions.ConnectionError("refused")
        self.assertEqual(popcorn_chat_client.send_utterance("movies", http_session, "abc"), "abc")

    def test_chat_loop_reset_and_exit(self):
        """'reset' posts to the reset endpoint and 'exit' ends the loop."""
        logger.info(f"Running test_chat_loop_reset_and_exit")
        with mock.patch.object(popcorn_chat_client.requests, "Session") as session_class, \
                mock.patch("builtins.input", side_effect=["dramas", "reset", "exit"]), \
                mock.patch("builtins.print"):
            http_session = session_class.return_value.__enter__.return_value
            http_session.post.return_value.json.return_value = {"summary": "Top 10 drama movies.", "session_id": "s1"}
            popcorn_chat_client.popcorn_chat_client(max_attempts=5)
        urls = [call.args[0] for call in http_session.post.call_args_list]
        self.assertEqual(urls, [popcorn_chat_client.ASK_URL, popcorn_chat_client.RESET_URL])
        self.assertEqual(http_session.post.call_args.kwargs["json"], {"session_id": "s1"})


if __name__ == "__main__":
    unittest.main(verbosity=2)
