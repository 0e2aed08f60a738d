import unittest

import app as app_mod             # noqa: E402
from app import app as flask_app  # noqa: E402
from game import MemoryScorePersistence  # noqa: E402


class TestFlaskAPIEdges(unittest.TestCase):
    def setUp(self):
        app_mod.set_persistence(MemoryScorePersistence())
        app_mod.reset_sessions()
        self.client = flask_app.test_client()

    def tearDown(self):
        app_mod.reset_sessions()
        app_mod.set_persistence(None)

    def _game_id(self):
        r = self.client.post("/api/new", json={"seed": 9})
        return r.get_json()["state"]["gameId"]

    def test_given_bad_size_or_target_when_new_then_400(self):
        for body in ({"size": 1}, {"size": 100000}, {"size": 17}, {"target": 100}, {"size": "abc"},
                     {"preset": "preset-3"}, {"seed": "x"}):
            r = self.client.post("/api/new", json=body)
            self.assertEqual(r.status_code, 400, body)
            data = r.get_json()
            self.assertFalse(data["ok"])
            self.assertIn("error", data)

    def test_given_largest_allowed_size_when_new_then_created(self):
        r = self.client.post("/api/new", json={"size": app_mod.MAX_SIZE, "initialTiles": 0})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.get_json()["state"]["rows"]), app_mod.MAX_SIZE)

    def test_given_empty_body_when_new_then_defaults(self):
        r = self.client.post("/api/new", data="not json", content_type="text/plain")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.get_json()["state"]["size"], 4)

    def test_given_bad_direction_when_move_then_400(self):
        gid = self._game_id()
        for direction in ("", "sideways", None):
            r = self.client.post("/api/move", json={"gameId": gid, "direction": direction})
            self.assertEqual(r.status_code, 400)
            self.assertFalse(r.get_json()["ok"])

    def test_given_unknown_or_missing_game_when_calling_then_404(self):
        for path, body in (
            ("/api/state", {"gameId": "missing"}),
            ("/api/move", {"gameId": "missing", "direction": "left"}),
            ("/api/continue", {"gameId": "missing"}),
            ("/api/restart", {"gameId": "missing"}),
            ("/api/state", {}),
            ("/api/state", {"gameId": 12}),
        ):
            r = self.client.post(path, json=body)
            self.assertEqual(r.status_code, 404, path)
            self.assertFalse(r.get_json()["ok"])

    def test_given_playing_game_when_continue_then_no_change(self):
        gid = self._game_id()
        r = self.client.post("/api/continue", json={"gameId": gid})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.get_json()["state"]["status"], "playing")

    def test_given_bad_initial_tiles_when_restart_then_400(self):
        gid = self._game_id()
        r = self.client.post("/api/restart", json={"gameId": gid, "initialTiles": "many"})
        self.assertEqual(r.status_code, 400)


if __name__ == "__main__":
    unittest.main(verbosity=2)
