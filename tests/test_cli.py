import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from game import Direction, SqliteScorePersistence
from tilemerge_core.cli import main, parse_moves


class TestCli(unittest.TestCase):
    def _run(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_given_move_scripts_when_parsing_then_directions(self):
        self.assertEqual(
            parse_moves('LLUR'),
            [Direction.LEFT, Direction.LEFT, Direction.UP, Direction.RIGHT],
        )
        self.assertEqual(parse_moves('left, down'), [Direction.LEFT, Direction.DOWN])
        self.assertEqual(parse_moves('l d'), [Direction.LEFT, Direction.DOWN])
        self.assertEqual(parse_moves(''), [])
        with self.assertRaises(ValueError):
            parse_moves('LXR')

    def test_given_seed_and_moves_when_running_then_boards_printed_and_best_saved(self):
        with tempfile.TemporaryDirectory() as td:
            db = os.path.join(td, 'scores.db')
            code, text = self._run('--seed', '4', '--moves', 'LURDLURD', '--db', db, '--key', 'cli')
            self.assertEqual(code, 0)
            self.assertIn('Initial board:', text)
            self.assertEqual(text.count('score: '), 9)
            best = SqliteScorePersistence(db).load_best_score('cli')
            self.assertIn(f'best: {best}', text.splitlines()[-1])

    def test_given_preset_when_running_without_continue_then_moves_ignored(self):
        with tempfile.TemporaryDirectory() as td:
            code, text = self._run('--preset', 'preset-1024', '--seed', '2', '--moves', 'LR',
                                   '--db', os.path.join(td, 's.db'))
            self.assertEqual(code, 0)
            self.assertIn('status: won', text)
            self.assertIn('ignoring remaining moves', text)

            code, text = self._run('--preset', 'preset-1024', '--seed', '2', '--moves', 'LR', '--continue',
                                   '--db', os.path.join(td, 's.db'))
            self.assertNotIn('ignoring remaining moves', text)
            self.assertIn('status: playing', text)

    def test_given_bad_arguments_when_running_then_usage_error(self):
        with tempfile.TemporaryDirectory() as td:
            for argv in (['--moves', 'Q'], ['--size', '1'], ['--target', '6']):
                with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
                    main(argv + ['--db', os.path.join(td, 's.db')])
                self.assertEqual(ctx.exception.code, 2)


if __name__ == '__main__':
    unittest.main()
