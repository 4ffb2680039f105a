#!/usr/bin/env python3
"""
Unit tests for GrowthEngine and TransportNetworkBuilder.
"""

import dataclasses
import math
import os
import random
import sys
import unittest
from types import SimpleNamespace
from unittest.mock import Mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roadgrowth.builder import TransportNetworkBuilder
from roadgrowth.contracts import HIGHWAY, Candidate, PathAttr, Site
from roadgrowth.core.config import BranchConfig, NetworkConfig, RotationConfig
from roadgrowth.growth.candidate_queue import CandidateQueue
from roadgrowth.growth.cost_model import SEA_LEVEL
from roadgrowth.growth.growth_engine import GrowthEngine, GrowthState
from roadgrowth.network import SiteRegistry
from roadgrowth.random_stream import RandomStream
from roadgrowth.spatial.spatial_index import IndexConsistencyError, PathIndex
from roadgrowth.terrain import ConstantTerrain, FunctionTerrain, TerrainDomainError

LOCAL = PathAttr(is_highway=False, is_even=False)


def hills(x, y):
    return 1.0 + 0.5 * math.sin(x / 7.0) * math.cos(y / 5.0) + 0.01 * x


def scenario_builder():
    return (
        TransportNetworkBuilder()
        .set_start(0.0, 0.0)
        .set_branch_length(10.0)
        .set_branch_angle_deviation(0.1)
        .set_branch_max_angle(1.0)
    )


def snapshot(network):
    return (network.sites, sorted((u, v, attrs.is_highway, attrs.is_even) for u, v, attrs in network.edges()))


def empty_state(seed=0):
    return GrowthState(
        registry=SiteRegistry(),
        paths=PathIndex(),
        queue=CandidateQueue(),
        rng=RandomStream(seed)
    )


class TestScenarios(unittest.TestCase):
    """Small builds with known outcomes."""

    def test_zero_iterations_keeps_only_start(self):
        network = scenario_builder().set_iterations(0).build(1, ConstantTerrain(1.0))
        self.assertEqual(network.node_count(), 1)
        self.assertEqual(network.edge_count(), 0)
        self.assertEqual(network.site(0), Site(0.0, 0.0))

    def test_single_iteration_commits_first_initial_candidate(self):
        network = scenario_builder().set_iterations(1).build(1, ConstantTerrain(1.0))

        self.assertEqual(network.node_count(), 2)
        self.assertEqual(network.edge_count(), 1)
        neighbors = network.neighbors(0)
        self.assertEqual(len(neighbors), 1)
        self.assertEqual(neighbors[0].index, 1)
        self.assertTrue(neighbors[0].is_highway)
        self.assertFalse(neighbors[0].is_even)

        # Both initial candidates cost 0; the one at theta was pushed first
        theta = random.Random(1).random() * math.pi
        self.assertAlmostEqual(network.site(1).x, 10.0 * math.cos(theta))
        self.assertAlmostEqual(network.site(1).y, 10.0 * math.sin(theta))

    def test_initial_candidates_outside_domain_are_discarded(self):
        terrain = ConstantTerrain(1.0, bounds=(-1, -1, 1, 1))
        engine = GrowthEngine(scenario_builder().set_iterations(100).config)
        network = engine.build(1, terrain)

        self.assertEqual(network.node_count(), 1)
        self.assertEqual(engine.last_stats['iterations'], 0)

    def test_start_outside_domain_fails(self):
        terrain = ConstantTerrain(1.0, bounds=(5, 5, 10, 10))
        with self.assertRaises(TerrainDomainError):
            scenario_builder().set_iterations(10).build(1, terrain)

    def test_start_below_sea_level_is_kept_alone(self):
        engine = GrowthEngine(scenario_builder().set_iterations(10).config)
        network = engine.build(1, ConstantTerrain(0.0))

        self.assertEqual(network.node_count(), 1)
        self.assertEqual(network.site(0), Site(0.0, 0.0))
        self.assertEqual(engine.last_stats['pushed'], 0)


class TestNetworkProperties(unittest.TestCase):
    """Properties that hold for any build."""

    def setUp(self):
        self.builder = (
            scenario_builder()
            .set_branch_length(4.0)
            .set_branch_angle_deviation(0.2)
            .set_branch_max_angle(0.6)
            .set_normal_rotation_probability(0.7)
            .set_highway_rotation_probability(0.2)
            .set_iterations(300)
        )

    def test_determinism(self):
        terrain = FunctionTerrain(hills, bounds=(-60, -60, 60, 60))
        first = self.builder.build(11, terrain)
        second = self.builder.build(11, terrain)
        self.assertEqual(snapshot(first), snapshot(second))
        self.assertGreater(first.node_count(), 10)

    def test_different_seeds_differ(self):
        terrain = FunctionTerrain(hills, bounds=(-60, -60, 60, 60))
        self.assertNotEqual(snapshot(self.builder.build(1, terrain)), snapshot(self.builder.build(2, terrain)))

    def test_no_duplicate_edges(self):
        network = self.builder.build(5, FunctionTerrain(hills, bounds=(-60, -60, 60, 60)))
        pairs = [frozenset((u, v)) for u, v, _ in network.edges()]
        self.assertEqual(len(pairs), len(set(pairs)))
        for u, v, _ in network.edges():
            self.assertNotEqual(u, v)
            self.assertIn(u, [n.index for n in network.neighbors(v)])
            self.assertIn(v, [n.index for n in network.neighbors(u)])

    def test_sites_stay_inside_domain(self):
        terrain = ConstantTerrain(1.0, bounds=(-25, -25, 25, 25))
        network = self.builder.build(3, terrain)
        for site in network.sites:
            self.assertIsNotNone(terrain.get_altitude(site.x, site.y))

    def test_no_site_below_sea_level(self):
        # Water everywhere west of x = 0
        terrain = FunctionTerrain(lambda x, y: x / 10.0, bounds=(-60, -60, 60, 60))
        network = self.builder.set_start(20.0, 0.0).build(4, terrain)
        self.assertGreater(network.node_count(), 1)
        for site in network.sites:
            self.assertGreaterEqual(terrain.get_altitude(site.x, site.y), SEA_LEVEL)

    def test_iteration_budget(self):
        engine = GrowthEngine(self.builder.set_iterations(25).config)
        engine.build(2, ConstantTerrain(1.0))
        self.assertEqual(engine.last_stats['iterations'], 25)

    def test_highways_reach_the_network(self):
        network = self.builder.build(6, FunctionTerrain(hills, bounds=(-60, -60, 60, 60)))
        self.assertTrue(any(attrs.is_highway for _, _, attrs in network.edges()))


class TestBranchAttrs(unittest.TestCase):
    """Lateral branch attribute rules and random draws."""

    def setUp(self):
        config = NetworkConfig(rotation=RotationConfig(
            highway_rotation_probability=0.25,
            normal_rotation_probability=0.75
        ))
        self.engine = GrowthEngine(config)
        self.state = SimpleNamespace(rng=Mock())

    def test_straight_inherits_without_drawing(self):
        self.assertEqual(self.engine.branch_attrs(self.state, HIGHWAY, 0), HIGHWAY)
        self.state.rng.gen_bool.assert_not_called()

    def test_highway_parent_keeps_highway(self):
        self.state.rng.gen_bool.return_value = True
        attrs = self.engine.branch_attrs(self.state, HIGHWAY, -1)
        self.assertEqual(attrs, PathAttr(is_highway=True, is_even=True))
        self.state.rng.gen_bool.assert_called_once_with(0.25)

    def test_highway_parent_falls_back_to_local(self):
        self.state.rng.gen_bool.return_value = False
        attrs = self.engine.branch_attrs(self.state, HIGHWAY, 1)
        self.assertEqual(attrs, PathAttr(is_highway=False, is_even=True))
        self.state.rng.gen_bool.assert_called_once_with(0.25)

    def test_local_parent_may_skip(self):
        self.state.rng.gen_bool.return_value = False
        self.assertIsNone(self.engine.branch_attrs(self.state, PathAttr(False, True), 1))
        self.state.rng.gen_bool.assert_called_once_with(0.75)

    def test_local_parent_branches(self):
        self.state.rng.gen_bool.return_value = True
        attrs = self.engine.branch_attrs(self.state, PathAttr(False, True), -1)
        self.assertEqual(attrs, PathAttr(is_highway=False, is_even=False))

    def test_draw_order_for_committed_highway(self):
        engine = GrowthEngine(scenario_builder().config)
        state = empty_state(seed=8)
        terrain = ConstantTerrain(1.0)

        engine.initialize(state, terrain)
        self.assertEqual(state.rng.draw_count, 1)
        self.assertEqual(len(state.queue), 2)

        engine.grow_one_step(state, terrain)
        # One draw per lateral direction, none for straight
        self.assertEqual(state.rng.draw_count, 3)


class TestSweep(unittest.TestCase):

    def setUp(self):
        config = scenario_builder().config
        self.engine = GrowthEngine(config)
        self.state = empty_state()
        self.state.registry.register(Site(-10, 0), 1.0)
        self.state.registry.register(Site(0, 0), 1.0)
        self.parent = Candidate(0, Site(0, 0), 1.0, 0.0, 0.0, LOCAL)

    def test_picks_cheapest_angle(self):
        # Elevation matches the parent's only along y = 3
        terrain = FunctionTerrain(lambda x, y: 1.0 + 0.01 * (y - 3.0) ** 2)
        best = self.engine.sweep(self.state, self.parent, 1, 0.0, LOCAL, terrain)

        self.assertAlmostEqual(best.heading_angle, 0.3)
        self.assertEqual(best.start_index, 1)
        self.assertAlmostEqual(best.end_site.x, 10.0 * math.cos(0.3))
        self.assertEqual(best.attrs, LOCAL)

    def test_prefers_first_angle_on_ties(self):
        best = self.engine.sweep(self.state, self.parent, 1, 0.5, LOCAL, ConstantTerrain(1.0))
        self.assertAlmostEqual(best.heading_angle, 0.5)
        self.assertEqual(best.cost, 0.0)

    def test_uses_branch_length_weights(self):
        attrs = PathAttr(is_highway=True, is_even=True)
        best = self.engine.sweep(self.state, self.parent, 1, 0.0, attrs, ConstantTerrain(1.0))
        self.assertAlmostEqual(best.end_site.x, 10.0 * 1.5 * 1.5)

    def test_no_valid_angle(self):
        self.assertIsNone(self.engine.sweep(self.state, self.parent, 1, 0.0, LOCAL, ConstantTerrain(0.0)))
        terrain = ConstantTerrain(1.0, bounds=(-1, -1, 1, 1))
        self.assertIsNone(self.engine.sweep(self.state, self.parent, 1, 0.0, LOCAL, terrain))


class TestConflictResolution(unittest.TestCase):
    """Merging candidates into existing nodes and paths."""

    def setUp(self):
        self.engine = GrowthEngine(scenario_builder().config)
        self.state = empty_state()
        self.terrain = ConstantTerrain(1.0)

        registry = self.state.registry
        registry.register(Site(0, 0), 1.0)
        registry.register(Site(20, 0), 1.0)
        registry.register(Site(10, 10), 1.0)
        self.existing = self.state.paths.insert(0, 1, Site(0, 0), Site(20, 0), HIGHWAY)

    def push(self, end_site):
        heading = math.atan2(end_site.y - 10, end_site.x - 10)
        self.state.queue.push(Candidate(2, end_site, 1.0, heading, 0.0, LOCAL))

    def test_snaps_to_existing_node(self):
        self.push(Site(19, 1))
        self.assertTrue(self.engine.grow_one_step(self.state, self.terrain))

        self.assertEqual(len(self.state.registry), 3)
        self.assertEqual(len(self.state.queue), 0)
        self.assertEqual(
            [(p.start_index, p.end_index, p.attrs) for p in self.state.paths],
            [(0, 1, HIGHWAY), (2, 1, LOCAL)]
        )

    def test_splits_crossed_path(self):
        self.push(Site(10, -5))
        self.engine.grow_one_step(self.state, self.terrain)

        self.assertEqual(len(self.state.registry), 4)
        self.assertEqual(self.state.registry.site(3), Site(10, 0))
        self.assertNotIn(self.existing, self.state.paths)
        self.assertEqual(
            [(p.start_index, p.end_index, p.attrs) for p in self.state.paths],
            [(0, 3, HIGHWAY), (3, 1, HIGHWAY), (2, 3, LOCAL)]
        )
        self.assertEqual(len(self.state.queue), 0)

    def test_no_proper_crossing_commits(self):
        self.push(Site(10, 3))
        self.engine.grow_one_step(self.state, self.terrain)

        self.assertEqual(len(self.state.registry), 4)
        self.assertEqual(self.state.registry.site(3), Site(10, 3))
        self.assertIn(self.existing, self.state.paths)
        self.assertEqual(
            [(p.start_index, p.end_index) for p in self.state.paths],
            [(0, 1), (2, 3)]
        )
        self.assertGreaterEqual(len(self.state.queue), 1)

    def test_crossing_without_elevation_commits(self):
        terrain = FunctionTerrain(lambda x, y: None if abs(y) < 0.5 else 1.0)
        self.push(Site(10, -5))
        self.engine.grow_one_step(self.state, terrain)

        self.assertEqual(self.state.registry.site(3), Site(10, -5))
        self.assertIn(self.existing, self.state.paths)

    def test_crossing_below_sea_level_commits(self):
        terrain = FunctionTerrain(lambda x, y: 0.0 if abs(y) < 0.5 else 1.0)
        self.push(Site(10, -5))
        self.engine.grow_one_step(self.state, terrain)

        self.assertEqual(len(self.state.registry), 4)
        self.assertEqual(self.state.registry.site(3), Site(10, -5))
        self.assertIn(self.existing, self.state.paths)
        self.assertEqual(
            [(p.start_index, p.end_index) for p in self.state.paths],
            [(0, 1), (2, 3)]
        )
        self.assertEqual(self.state.stats['split'], 0)
        self.assertEqual(self.state.stats['committed'], 1)

    def test_empty_queue(self):
        self.assertFalse(self.engine.grow_one_step(self.state, self.terrain))

    def test_inconsistent_index_is_fatal(self):
        self.state.paths.remove(self.existing)
        with self.assertRaises(IndexConsistencyError):
            self.state.paths.split(self.existing, Site(10, 0), 3)


class TestBuilder(unittest.TestCase):

    def test_setters_return_new_builders(self):
        base = TransportNetworkBuilder()
        changed = base.set_iterations(5).set_branch_length(2.0).set_seed(3)

        self.assertEqual(base.config, NetworkConfig())
        self.assertEqual(changed.config.iterations, 5)
        self.assertEqual(changed.config.branch.length, 2.0)
        self.assertEqual(changed.config.seed, 3)

    def test_setters_cover_every_parameter(self):
        builder = (
            TransportNetworkBuilder()
            .set_start(1, 2)
            .set_branch_angle_deviation(0.05)
            .set_branch_max_angle(0.2)
            .set_highway_rotation_probability(0.1)
            .set_normal_rotation_probability(0.9)
            .set_highway_construction_priority(10.0)
            .set_even_path_length_weight(1.2)
            .set_highway_path_length_weight(1.3)
        )
        config = builder.config
        self.assertEqual(config.start, (1.0, 2.0))
        self.assertEqual(config.branch, BranchConfig(length=0.5, angle_deviation=0.05, max_angle=0.2))
        self.assertEqual(config.rotation, RotationConfig(0.1, 0.9))
        self.assertEqual(config.weights.highway_construction_priority, 10.0)
        self.assertEqual(config.weights.even_path_length_weight, 1.2)
        self.assertEqual(config.weights.highway_path_length_weight, 1.3)

    def test_derived_builders_share_no_mutable_state(self):
        base = TransportNetworkBuilder().set_branch_length(10.0)
        derived = base.set_iterations(5)

        with self.assertRaises(dataclasses.FrozenInstanceError):
            derived.config.weights.highway_construction_priority = 0.0
        with self.assertRaises(dataclasses.FrozenInstanceError):
            derived.config.branch.length = 0.0
        self.assertEqual(base.config.weights.highway_construction_priority, 30.0)
        self.assertEqual(base.config.iterations, 1000)
        self.assertEqual(derived.config.branch.length, 10.0)

    def test_invalid_setting_rejected_eagerly(self):
        with self.assertRaises(ValueError):
            TransportNetworkBuilder().set_branch_angle_deviation(0.0)
        with self.assertRaises(ValueError):
            TransportNetworkBuilder().set_normal_rotation_probability(2.0)

    def test_build_without_seed_uses_configured_seed(self):
        builder = scenario_builder().set_iterations(40).set_seed(12)
        terrain = FunctionTerrain(hills)
        self.assertEqual(snapshot(builder.build(None, terrain)), snapshot(builder.build(12, terrain)))


if __name__ == '__main__':
    unittest.main()
