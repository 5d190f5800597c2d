import sys
import unittest
from unittest import mock
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import qssvars.resolver as resolver_module
from qssvars.resolver import resolve_all, resolve_variable


class ResolveVariableTests(unittest.TestCase):
    def test_literal_value_is_returned_unchanged(self):
        self.assertEqual("#123456", resolve_variable("C", {"C": "#123456"}))

    def test_missing_name_resolves_to_empty(self):
        self.assertEqual("", resolve_variable("Missing", {"C": "#123456"}))

    def test_chain_resolves_to_final_literal(self):
        variables = {"A": "@B", "B": "@C", "C": "#010203"}
        self.assertEqual(
            {"A": "#010203", "B": "#010203", "C": "#010203"},
            resolve_all(variables),
        )

    def test_direct_cycle_resolves_to_empty(self):
        self.assertEqual({"A": "", "B": ""}, resolve_all({"A": "@B", "B": "@A"}))

    def test_self_reference_resolves_to_empty(self):
        self.assertEqual("", resolve_variable("A", {"A": "@A"}))

    def test_indirect_cycle_keeps_surrounding_text(self):
        variables = {"A": "1px solid @B", "B": "@C", "C": "@A"}
        self.assertEqual("1px solid ", resolve_variable("A", variables))

    def test_reference_embedded_in_longer_value(self):
        variables = {"Base": "#101010", "Border": "1px solid @Base"}
        self.assertEqual("1px solid #101010", resolve_variable("Border", variables))

    def test_unknown_reference_becomes_empty(self):
        self.assertEqual("1px solid ", resolve_variable("Border", {"Border": "1px solid @Nope"}))

    def test_diamond_references_resolve_both_branches(self):
        variables = {
            "A": "@B @C",
            "B": "@D",
            "C": "@D",
            "D": "#0d0d0d",
        }
        self.assertEqual("#0d0d0d #0d0d0d", resolve_variable("A", variables))

    def test_prefix_names_are_resolved_as_whole_tokens(self):
        variables = {"C": "#111", "CDark": "#222", "Use": "@CDark @C"}
        self.assertEqual("#222 #111", resolve_variable("Use", variables))

    def test_top_level_calls_do_not_share_state(self):
        variables = {"A": "@C", "B": "@C", "C": "#0c0c0c"}
        resolved = resolve_all(variables)
        self.assertEqual("#0c0c0c", resolved["A"])
        self.assertEqual("#0c0c0c", resolved["B"])

    def test_resolve_all_does_not_mutate_input(self):
        variables = {"A": "@B", "B": "#1"}
        resolve_all(variables)
        self.assertEqual({"A": "@B", "B": "#1"}, variables)

    def test_deep_chain_terminates(self):
        variables = {f"V{i}": f"@V{i + 1}" for i in range(200)}
        variables["V200"] = "#ffffff"
        self.assertEqual("#ffffff", resolve_variable("V0", variables))

    def test_chain_deeper_than_recursion_limit_resolves(self):
        depth = 5000
        variables = {f"V{i}": f"@V{i + 1}" for i in range(depth)}
        variables[f"V{depth}"] = "#ffffff"
        self.assertEqual("#ffffff", resolve_variable("V0", variables))

    def test_deep_cycle_terminates(self):
        depth = 5000
        variables = {f"V{i}": f"x@V{i + 1}" for i in range(depth)}
        variables[f"V{depth}"] = "@V0"
        with self.assertLogs("qssvars.resolver", level="WARNING"):
            self.assertEqual("x" * depth, resolve_variable("V0", variables))

    def test_preseeded_in_progress_names_resolve_to_empty(self):
        variables = {"A": "1px @B", "B": "#0b0b0b"}
        self.assertEqual("1px ", resolve_variable("A", variables, in_progress={"B"}))
        self.assertEqual("1px #0b0b0b", resolve_variable("A", variables))


class ResolverWarningTests(unittest.TestCase):
    def test_unknown_reference_is_logged(self):
        with self.assertLogs("qssvars.resolver", level="WARNING") as captured:
            value = resolve_variable("Border", {"Border": "1px solid @Bse", "Base": "#111"})

        self.assertEqual("1px solid ", value)
        self.assertEqual(1, len(captured.records))
        message = captured.records[0].getMessage()
        self.assertIn("@Bse", message)
        self.assertIn("@Border", message)

    def test_cyclic_reference_is_logged(self):
        with self.assertLogs("qssvars.resolver", level="WARNING") as captured:
            value = resolve_variable("A", {"A": "@B", "B": "@A"})

        self.assertEqual("", value)
        message = captured.records[0].getMessage()
        self.assertIn("Cyclic", message)
        self.assertIn("@A", message)
        self.assertIn("@B", message)

    def test_missing_top_level_name_is_not_logged(self):
        with mock.patch.object(resolver_module.logger, "warning") as warning:
            self.assertEqual("", resolve_variable("Missing", {"C": "#123456"}))
        warning.assert_not_called()


if __name__ == "__main__":
    unittest.main()
