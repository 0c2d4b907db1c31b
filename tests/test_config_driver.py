import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import pandas as pd

from swara_match.catalog import find_default_catalog_path
from swara_match.config import build_cli_parser, create_config, parse_config_from_argv
from swara_match.tokens import PitchClass

import driver


class ConfigTests(unittest.TestCase):
    def test_build_cli_parser_has_subcommands(self) -> None:
        parser = build_cli_parser()
        subparser_actions = [a for a in parser._actions if a.dest == "command"]
        self.assertTrue(subparser_actions)
        choices = subparser_actions[0].choices
        for mode in ("match", "classify", "prefix", "show", "list"):
            self.assertIn(mode, choices)

    def test_parse_match(self) -> None:
        config = parse_config_from_argv(["match", "-s", "Sa Re Ga", "--top", "3"])
        self.assertEqual(config.mode, "match")
        self.assertEqual(config.sequence, "Sa Re Ga")
        self.assertEqual(config.top_n, 3)
        self.assertTrue(config.catalog_path.endswith("raga_catalog.csv"))

    def test_root_invocation_defaults_to_match(self) -> None:
        config = parse_config_from_argv(["--sequence", "Sa Re Ga", "-n", "2"])
        self.assertEqual(config.mode, "match")
        self.assertEqual(config.top_n, 2)

    def test_root_invocation_requires_sequence(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_config_from_argv([])

    def test_parse_show(self) -> None:
        config = parse_config_from_argv(["show", "yaman"])
        self.assertEqual(config.mode, "show")
        self.assertEqual(config.raga_name, "yaman")

    def test_negative_top_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "--top"):
            parse_config_from_argv(["match", "-s", "Sa Re", "--top", "-1"])

    def test_bad_weights_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "sum to 1"):
            parse_config_from_argv(["match", "-s", "Sa Re", "--exact-weight", "0.9"])

    def test_negative_weight_rejected_at_construction(self) -> None:
        with self.assertRaisesRegex(ValueError, "non-negative"):
            create_config(
                "match",
                sequence="Sa Re",
                exact_partial_weight=1.2,
                edit_distance_weight=-0.2,
                set_overlap_weight=0.0,
            )

    def test_options_before_subcommand_are_kept(self) -> None:
        catalog_path = find_default_catalog_path()
        config = parse_config_from_argv(
            ["--catalog", catalog_path, "--top", "2", "-v", "match", "-s", "Sa Re Ga"]
        )
        self.assertEqual(config.mode, "match")
        self.assertEqual(config.catalog_path, catalog_path)
        self.assertEqual(config.top_n, 2)
        self.assertTrue(config.verbose)

    def test_options_after_subcommand_override_root(self) -> None:
        config = parse_config_from_argv(["--top", "2", "match", "-s", "Sa Re Ga", "--top", "4"])
        self.assertEqual(config.top_n, 4)
        self.assertFalse(config.verbose)
        self.assertTrue(config.catalog_path.endswith("raga_catalog.csv"))

    def test_bad_tonic_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "Invalid tonic"):
            parse_config_from_argv(["classify", "-s", "Sa Re", "--tonic", "H"])

    def test_missing_catalog_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            create_config("list", catalog_path="/nonexistent/ragas.csv")

    def test_sequence_modes_require_sequence(self) -> None:
        with self.assertRaisesRegex(ValueError, "requires --sequence"):
            create_config("prefix")

    def test_output_paths_made_absolute(self) -> None:
        config = create_config("match", sequence="Sa", csv_output="out/matches.csv")
        self.assertTrue(Path(config.csv_output).is_absolute())


class DriverTests(unittest.TestCase):
    def _run(self, config):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            result = driver.run_matcher(config)
        return result, buffer.getvalue()

    def test_match_writes_outputs(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            csv_path = Path(tmpdir) / "matches.csv"
            json_path = Path(tmpdir) / "nested" / "matches.json"
            config = create_config(
                "match",
                sequence="Sa Re Ga Ma' Pa Dha Ni Sa",
                top_n=3,
                csv_output=str(csv_path),
                json_output=str(json_path),
            )
            results, out = self._run(config)

            self.assertEqual(len(results), 3)
            self.assertEqual(results[0].entry_name, "Yaman")
            self.assertIn("Yaman", out)
            self.assertIn("Exact prefix match: Yaman (Arohana)", out)

            df = pd.read_csv(csv_path)
            self.assertEqual(df["rank"].tolist(), [1, 2, 3])
            self.assertEqual(df.iloc[0]["entry_name"], "Yaman")

            payload = json.loads(json_path.read_text(encoding="utf-8"))
            self.assertEqual(payload["sequence"], "Sa Re Ga Ma' Pa Dha Ni Sa")
            self.assertEqual(payload["matches"][0]["entry_name"], "Yaman")
            self.assertEqual(payload["matches"][0]["rank"], 1)

    def test_match_with_no_results(self) -> None:
        results, out = self._run(create_config("match", sequence="Xa Yo Zu"))
        self.assertEqual(results, [])
        self.assertIn("No matching ragas.", out)

    def test_classify_with_tonic(self) -> None:
        counts, out = self._run(create_config("classify", sequence="Sa re Ma' Pa Xy", tonic="C"))
        self.assertEqual(counts[PitchClass.TEEVRA], 1)
        self.assertEqual(counts[PitchClass.SHUDDHA], 2)
        self.assertIn("midi=60", out)
        self.assertIn("midi=66", out)

    def test_prefix(self) -> None:
        labels, out = self._run(create_config("prefix", sequence="Sa Re Ga Pa Dha Sa"))
        self.assertEqual([str(label) for label in labels], ["Bhupali (Arohana)"])
        self.assertIn("Bhupali (Arohana)", out)

    def test_show_and_missing(self) -> None:
        entry, out = self._run(create_config("show", raga_name="bhairavi"))
        self.assertEqual(entry.name, "Bhairavi")
        self.assertIn("Avarohana:", out)

        missing, out = self._run(create_config("show", raga_name="Darbari"))
        self.assertIsNone(missing)
        self.assertIn("[WARN]", out)

    def test_list(self) -> None:
        entries, out = self._run(create_config("list"))
        self.assertEqual(len(entries), 14)
        self.assertIn("14 ragas", out)


if __name__ == "__main__":
    unittest.main()
