import asyncio
import json

from stepleague.main import build_parser, params_from_args, run

from league_fixtures import LeagueSeeder, TODAY, new_id, open_database


class TestCommandLine:
    def test_only_given_options_become_params(self):
        args = build_parser().parse_args(['--league-id', 'abc', '--viewer-id', 'u1', '--sort-by', 'streak'])
        assert params_from_args(args) == {'league_id': 'abc', 'sort_by': 'streak'}

    def test_prints_leaderboard(self, tmp_path, capsys):
        url = f"sqlite+aiosqlite:///{tmp_path / 'test_stepleague.db'}"

        async def scenario():
            async with open_database(tmp_path) as db:
                s = LeagueSeeder(db)
                league = await s.league()
                viewer = await s.user("Viewer", league_id=league)
                await s.submit(TODAY, 4200, user_id=viewer)
            return await run([
                '--league-id', league, '--viewer-id', viewer, '--database-url', url,
                '--period', 'custom', '--start-date', TODAY.isoformat(), '--end-date', TODAY.isoformat(),
            ])

        exit_code = asyncio.run(scenario())
        payload = json.loads(capsys.readouterr().out)

        assert exit_code == 0
        assert payload["leaderboard"][0]["total_steps"] == 4200
        assert payload["meta"]["total_members"] == 1

    def test_prints_error_body(self, tmp_path, capsys):
        url = f"sqlite+aiosqlite:///{tmp_path / 'test_stepleague.db'}"
        exit_code = asyncio.run(run(['--league-id', new_id(), '--viewer-id', 'nobody', '--database-url', url]))
        payload = json.loads(capsys.readouterr().out)

        assert exit_code == 1
        assert payload["error"]["code"] == "API_FORBIDDEN"
