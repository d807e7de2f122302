from stepleague.utils.error_responses import ErrorResponses, build_error_response
from stepleague.utils.leaderboard_exceptions import (
    DataSourceError, LeaderboardException, NotAuthorizedError, ValidationError
)


class TestErrorResponses:
    def test_validation_error(self):
        status, body = build_error_response(ValidationError('limit', "must be at most 200"))

        assert status == 400
        assert body["error"]["code"] == "VALIDATION_FAILED"
        assert "limit" in body["error"]["message"]

    def test_not_authorized(self):
        status, body = build_error_response(NotAuthorizedError("league-1", "user-1"))

        assert status == 403
        assert body["error"] == {"code": "API_FORBIDDEN", "message": "You are not a member of this league"}

    def test_data_source_error_hides_details(self):
        status, body = build_error_response(DataSourceError("user submission fetch", "no such table: submissions"))

        assert status == 500
        assert body["error"]["code"] == "DB_QUERY_FAILED"
        assert "no such table" not in body["error"]["message"]

    def test_unexpected_exception(self):
        status, body = ErrorResponses.from_exception(RuntimeError("boom"))

        assert status == 500
        assert body["error"]["code"] == "UNKNOWN_ERROR"
        assert "boom" not in body["error"]["message"]

    def test_user_message_defaults_to_message(self):
        exc = LeaderboardException("something happened")
        assert exc.user_message == "something happened"
        assert build_error_response(exc)[0] == 500
