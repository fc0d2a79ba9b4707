"""Tests for fast Poisson-disk sampling."""

import math

import numpy as np
import pytest

from terrascatter.exceptions import InvalidArgumentError
from terrascatter.sampling import (
    DEFAULT_ITERATIONS_PER_POINT,
    _SampleGrid,
    generate_samples,
    sample_with_stats,
)
from terrascatter.types import Bounds, Point


def _min_pairwise_distance(points: list[Point]) -> float:
    coords = np.array([(p.x, p.y) for p in points])
    diffs = coords[:, None, :] - coords[None, :, :]
    dists = np.sqrt((diffs**2).sum(axis=-1))
    np.fill_diagonal(dists, np.inf)
    return float(dists.min())


class TestSeparationAndContainment:
    """Core invariants of the returned sample set."""

    def test_min_distance_respected(self, rng) -> None:
        points = generate_samples((0, 0), (100, 100), 10.0, 30, rng)
        assert len(points) > 1
        assert _min_pairwise_distance(points) >= 10.0 - 1e-9

    def test_points_inside_bounds(self, rng) -> None:
        points = generate_samples((0, 0), (100, 100), 10.0, 30, rng)
        for p in points:
            assert 0 <= p.x < 100
            assert 0 <= p.y < 100

    def test_offset_rectangle(self, rng) -> None:
        """Bounds away from the origin are honoured."""
        points = generate_samples(Point(-50, 20), Point(50, 80), 4.0, 30, rng)
        assert all(-50 <= p.x < 50 and 20 <= p.y < 80 for p in points)
        assert _min_pairwise_distance(points) >= 4.0 - 1e-9

    def test_non_square_rectangle(self, rng) -> None:
        points = generate_samples((0, 0), (200, 15), 5.0, 30, rng)
        assert all(0 <= p.x < 200 and 0 <= p.y < 15 for p in points)
        assert _min_pairwise_distance(points) >= 5.0 - 1e-9


class TestPackingDensity:
    """Sample counts for a 100x100 square with d = 10."""

    def test_count_within_packing_bounds(self) -> None:
        """No more points than discs of radius d/2 fit; well above a sparse fill."""
        area = 100.0 * 100.0
        upper = area / (math.pi * (10.0 / 2) ** 2)
        for seed in range(5):
            points = generate_samples(
                (0, 0), (100, 100), 10.0, 30, np.random.default_rng(seed)
            )
            assert 40 <= len(points) <= upper

    def test_seed_point_comes_first(self, rng) -> None:
        """The first sample is the uniformly drawn seed."""
        expected = np.random.default_rng(1234)
        points = generate_samples((0, 0), (100, 100), 10.0, 30, rng)
        assert points[0] == Point(expected.uniform(0, 100), expected.uniform(0, 100))

    def test_seed_at_top_edge_pulled_inside(self, max_random) -> None:
        """A seed draw landing on the excluded top edge is moved just inside."""
        points = generate_samples((0, 0), (10, 10), 3.0, 1, max_random)
        assert points[0].x < 10 and points[0].y < 10
        assert points[0] == Point(math.nextafter(10, 0), math.nextafter(10, 0))
        assert Bounds(Point(0, 0), Point(10, 10)).contains(points[0])


class TestTermination:
    """The frontier always drains."""

    def test_rectangle_smaller_than_distance(self, rng) -> None:
        """Every candidate leaves a 1x1 square, so only the seed remains."""
        points, stats = sample_with_stats((0, 0), (1, 1), 10.0, 30, rng)
        assert len(points) == 1
        assert stats.rounds == 1
        assert stats.rejected_out_of_bounds == 30

    def test_each_point_retired_once(self, rng) -> None:
        """Every accepted point eventually leaves the frontier."""
        points, stats = sample_with_stats((0, 0), (60, 60), 5.0, 30, rng)
        # One fruitless round per point, plus the rounds that grew the set
        assert stats.rounds >= len(points)
        assert stats.candidates == stats.rounds * 30
        assert stats.peak_frontier >= 1

    def test_rejections_account_for_all_candidates(self, rng) -> None:
        points, stats = sample_with_stats((0, 0), (60, 60), 5.0, 30, rng)
        accepted = len(points) - 1
        assert (
            accepted + stats.rejected_out_of_bounds + stats.rejected_too_close
            == stats.candidates
        )

    def test_zero_iterations_uses_default(self, rng) -> None:
        _, stats = sample_with_stats((0, 0), (40, 40), 5.0, 0, rng)
        assert stats.candidates == stats.rounds * DEFAULT_ITERATIONS_PER_POINT

    def test_negative_iterations_uses_default(self, rng) -> None:
        _, stats = sample_with_stats((0, 0), (40, 40), 5.0, -3, rng)
        assert stats.candidates == stats.rounds * DEFAULT_ITERATIONS_PER_POINT

    def test_single_iteration_budget(self, rng) -> None:
        """A budget of one still yields a valid, if sparse, set."""
        points = generate_samples((0, 0), (50, 50), 5.0, 1, rng)
        assert len(points) >= 1
        if len(points) > 1:
            assert _min_pairwise_distance(points) >= 5.0 - 1e-9


class TestDeterminism:
    """Same random sequence, same samples."""

    def test_same_seed(self) -> None:
        first = generate_samples((0, 0), (50, 50), 4.0, 30, np.random.default_rng(3))
        second = generate_samples((0, 0), (50, 50), 4.0, 30, np.random.default_rng(3))
        assert first == second

    def test_different_seed(self) -> None:
        first = generate_samples((0, 0), (50, 50), 4.0, 30, np.random.default_rng(3))
        second = generate_samples((0, 0), (50, 50), 4.0, 30, np.random.default_rng(4))
        assert first != second

    def test_fixed_sequence(self, cycling_random) -> None:
        first = generate_samples((0, 0), (30, 30), 3.0, 5, cycling_random())
        second = generate_samples((0, 0), (30, 30), 3.0, 5, cycling_random())
        assert first == second
        assert len(first) > 1
        assert _min_pairwise_distance(first) >= 3.0 - 1e-9


class TestInvalidArguments:
    """Bad input fails before any random draw."""

    def test_zero_width(self, forbidden_random) -> None:
        with pytest.raises(InvalidArgumentError):
            generate_samples((0, 0), (0, 100), 10.0, 30, forbidden_random)

    def test_zero_height(self, forbidden_random) -> None:
        with pytest.raises(InvalidArgumentError):
            generate_samples((0, 0), (100, 0), 10.0, 30, forbidden_random)

    def test_inverted_rectangle(self, forbidden_random) -> None:
        with pytest.raises(InvalidArgumentError):
            generate_samples((100, 100), (0, 0), 10.0, 30, forbidden_random)

    @pytest.mark.parametrize("distance", [0.0, -1.0, float("nan"), float("inf")])
    def test_bad_minimum_distance(self, distance, forbidden_random) -> None:
        with pytest.raises(InvalidArgumentError):
            generate_samples((0, 0), (100, 100), distance, 30, forbidden_random)

    @pytest.mark.parametrize("corner", [(0,), (0, 1, 2), "ab", (float("nan"), 0)])
    def test_bad_corner(self, corner, forbidden_random) -> None:
        with pytest.raises(InvalidArgumentError):
            generate_samples(corner, (100, 100), 10.0, 30, forbidden_random)


class TestSampleGrid:
    """Acceleration grid bookkeeping."""

    def test_dimensions(self) -> None:
        bounds = Bounds(Point(0, 0), Point(10, 5))
        grid = _SampleGrid(bounds, 10.0 / math.sqrt(2))
        assert (grid.width, grid.height) == (2, 1)
        assert grid.cells.shape == (3, 2)

    def test_cell_of_is_relative_to_bottom_left(self) -> None:
        bounds = Bounds(Point(-10, -10), Point(10, 10))
        grid = _SampleGrid(bounds, 2.0)
        assert grid.cell_of(Point(-10, -10)) == (0, 0)
        assert grid.cell_of(Point(-7.5, 1.0)) == (1, 5)

    def test_neighbours_window(self) -> None:
        bounds = Bounds(Point(0, 0), Point(20, 20))
        grid = _SampleGrid(bounds, 1.0)
        grid.insert(Point(5.5, 5.5), 0)
        grid.insert(Point(7.5, 3.5), 1)
        grid.insert(Point(8.5, 5.5), 2)

        # Cells (3..7, 3..7) around (5, 5); (8, 5) is outside the block
        assert sorted(grid.neighbours(Point(5.2, 5.2))) == [0, 1]

    def test_neighbours_clipped_at_edges(self) -> None:
        bounds = Bounds(Point(0, 0), Point(4, 4))
        grid = _SampleGrid(bounds, 1.0)
        grid.insert(Point(0.5, 0.5), 7)
        assert grid.neighbours(Point(0.1, 0.1)) == [7]
