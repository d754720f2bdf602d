"""Tests for the command line entry point."""
from tsp_algos import cli
from tsp_algos.evaluation import BenchmarkResult


class TestCompare:
    def test_prints_each_pipeline(self, capsys):
        cli.main(["compare", "--points", "6", "--pipelines", "exact", "nearest_neighbor+two_opt"])
        out = capsys.readouterr().out
        assert "reference length" in out
        assert "exact" in out
        assert "nearest_neighbor+two_opt" in out

    def test_skips_exact_past_limit(self, capsys):
        cli.main(["compare", "--points", "25", "--pipelines", "exact", "sonar_visit"])
        out = capsys.readouterr().out
        assert "skipping exact" in out
        assert "sonar_visit" in out


class TestBenchmark:
    def test_single_algorithm(self, capsys, monkeypatch):
        monkeypatch.setattr(cli, "find_max_n", _fake_find_max_n)
        cli.main(["benchmark", "--timeout", "1", "--only", "greedy_edge"])
        out = capsys.readouterr().out
        assert "greedy_edge" in out
        assert "held_karp" not in out


def _fake_find_max_n(name, run_fn, min_n, max_n, timeout, needs_matrix):
    return BenchmarkResult(name=name, max_n=min_n, time_ms=1.0)
