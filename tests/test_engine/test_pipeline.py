"""Tests for the pipeline orchestrator and full runs."""

import numpy as np
import pytest

from chunkgrid.engine.config import PipelineConfig, Placement
from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.pipeline import Pipeline, create_pipeline
from chunkgrid.engine.registry import Layer, StageRegistry, StageSpec
from chunkgrid.errors import ConfigurationError, StageError, UnsatisfiableClusterError
from chunkgrid.export import export_run
from chunkgrid.models.grid import CellClass, GridCoordinate
from chunkgrid.schematic.blocks import AIR
from chunkgrid.utils.hashing import is_power_of_two, make_hasher
from chunkgrid.utils.rasterizer import PIXEL_ANCHOR, PIXEL_CONNECTOR


def test_pipeline_runs_stages_in_order():
    reg = StageRegistry()
    results = []

    def s1(ctx: PipelineContext) -> None:
        results.append("s1")

    def s2(ctx: PipelineContext) -> None:
        results.append("s2")

    reg.register(StageSpec(id="S0.02", layer=Layer.SAMPLING, fn=s2, dependencies=["S0.01"]))
    reg.register(StageSpec(id="S0.01", layer=Layer.SAMPLING, fn=s1))

    ctx = Pipeline(registry=reg).run()

    assert results == ["s1", "s2"]
    assert ctx.completed_stages == ["S0.01", "S0.02"]
    assert set(ctx.timings_ms) == {"S0.01", "S0.02"}


def test_pipeline_wraps_unexpected_errors():
    reg = StageRegistry()

    def fail(ctx: PipelineContext) -> None:
        raise RuntimeError("test error")

    reg.register(StageSpec(id="S0.01", layer=Layer.SAMPLING, fn=fail))

    with pytest.raises(StageError) as info:
        Pipeline(registry=reg).run()
    assert info.value.stage_id == "S0.01"
    assert "test error" in str(info.value)


def test_pipeline_stops_at_first_failure():
    reg = StageRegistry()
    ran = []

    def fail(ctx: PipelineContext) -> None:
        raise ValueError("bad")

    reg.register(StageSpec(id="S0.01", layer=Layer.SAMPLING, fn=fail))
    reg.register(StageSpec(id="S1.01", layer=Layer.TREE, fn=lambda ctx: ran.append(1),
                           dependencies=["S0.01"]))
    with pytest.raises(StageError):
        Pipeline(registry=reg).run()
    assert ran == []


def test_configuration_errors_propagate_unwrapped(table_hasher):
    config = PipelineConfig(
        offset=(0, 0), scan_width=2, cluster_size=2, hash_space_size=8, max_scan_area=10,
    )
    pipeline = create_pipeline(config)
    ctx = pipeline.new_context(hash_fn=table_hasher({}))
    with pytest.raises(UnsatisfiableClusterError):
        pipeline.run(ctx)


def test_run_layer_only():
    reg = StageRegistry()
    seen = []
    reg.register(StageSpec(id="S0.01", layer=Layer.SAMPLING, fn=lambda ctx: seen.append("a")))
    reg.register(StageSpec(id="S1.01", layer=Layer.TREE, fn=lambda ctx: seen.append("b")))
    Pipeline(registry=reg).run_layer(PipelineContext(), Layer.TREE)
    assert seen == ["b"]


def test_missing_upstream_result():
    ctx = PipelineContext()
    with pytest.raises(RuntimeError):
        ctx.require("tree")


def test_require_returns_stored_result(small_config):
    ctx = Pipeline(config=small_config).run(stage_ids={"S1.01"})
    assert ctx.require("tree") is ctx.tree
    assert len(ctx.require("sample")) == small_config.cluster_size


def test_requested_subset_runs_dependencies(small_config):
    ctx = create_pipeline(small_config).run(stage_ids={"S2.01"})
    assert ctx.completed_stages == ["S0.01", "S1.01", "S2.01"]
    assert ctx.region is None


def test_seeded_full_run(seeded_hasher):
    config = PipelineConfig(
        offset=(0, 0), scan_width=2, cluster_size=2, hash_space_size=8,
        max_scan_area=100, placement=Placement.PLANAR,
    )
    pipeline = create_pipeline(config)
    ctx = pipeline.run(pipeline.new_context(hash_fn=seeded_hasher))

    assert ctx.sample.coordinates == [GridCoordinate(0, 1), GridCoordinate(1, 0)]
    assert ctx.tree.total_weight == 2
    # Path (0,1) -> (1,1) -> (1,0): the corner is a connector.
    assert ctx.classified.get(GridCoordinate(1, 1)) is CellClass.CONNECTOR
    assert ctx.raster.tolist() == [
        [0, PIXEL_ANCHOR],
        [PIXEL_ANCHOR, PIXEL_CONNECTOR],
    ]
    assert ctx.encoded.palette[0] == AIR
    assert ctx.encoded.block_count == 3


def test_full_run_invariants(small_config):
    ctx = create_pipeline(small_config).run()
    k = small_config.cluster_size

    assert len(ctx.sample) == k
    assert len(ctx.tree.edges) == k - 1
    assert len(ctx.classified.anchors) == k
    assert ctx.anomalies == []
    assert ctx.raster.shape == (small_config.scan_width, ctx.sample.region.columns)
    assert int((ctx.raster == PIXEL_ANCHOR).sum()) == k
    assert ctx.encoded.palette[0] == AIR
    assert ctx.encoded.block_count == len(ctx.region)


def test_single_cell_run(small_config):
    config = PipelineConfig(
        offset=small_config.offset, scan_width=small_config.scan_width,
        cluster_size=1, hash_space_size=small_config.hash_space_size,
    )
    ctx = create_pipeline(config).run()

    assert ctx.tree.edges == ()
    assert ctx.classified.connectors == []
    assert len(ctx.classified.anchors) == 1
    assert int((ctx.raster > 0).sum()) == 1


def test_export_is_byte_identical(tmp_path, small_config):
    outputs = []
    for name in ("a", "b"):
        ctx = create_pipeline(small_config).run()
        summary = export_run(ctx, tmp_path / name)
        outputs.append(summary)

    for attr in ("raster_path", "schematic_path"):
        first = open(getattr(outputs[0], attr), "rb").read()
        second = open(getattr(outputs[1], attr), "rb").read()
        assert first == second
    assert outputs[0].cluster_size == small_config.cluster_size


def test_planar_export(tmp_path, planar_config):
    ctx = create_pipeline(planar_config).run()
    summary = export_run(ctx, tmp_path)

    region = summary.regions[0]
    assert region.size[1] == 1
    assert region.block_count == len(ctx.classified)
    assert region.palette[0] == "minecraft:air"
    assert (tmp_path / "chunks.png").exists()
    assert (tmp_path / "chunks.litematic").exists()


class TestConfig:
    @pytest.mark.parametrize("size", [0, 3, 1000, 2047])
    def test_hash_space_must_be_power_of_two(self, size):
        with pytest.raises(ConfigurationError):
            PipelineConfig(hash_space_size=size)

    @pytest.mark.parametrize("size", [-4, 1, 2, 64, 96])
    def test_hash_space_check_matches_hasher(self, size):
        if is_power_of_two(size):
            config = PipelineConfig(hash_space_size=size, cluster_size=1)
            assert make_hasher(config.hash_space_size)(0, 0) < size
        else:
            with pytest.raises(ConfigurationError):
                PipelineConfig(hash_space_size=size, cluster_size=1)
            with pytest.raises(ConfigurationError):
                make_hasher(size)

    @pytest.mark.parametrize("k", [0, -1, 2049])
    def test_cluster_size_range(self, k):
        with pytest.raises(ConfigurationError):
            PipelineConfig(cluster_size=k, hash_space_size=2048)

    def test_scan_bounds(self):
        with pytest.raises(ConfigurationError):
            PipelineConfig(scan_width=0)
        with pytest.raises(ConfigurationError):
            PipelineConfig(scan_width=10, max_scan_area=9)

    def test_enums_from_strings(self):
        config = PipelineConfig(placement="planar", width_mode="legacy")
        assert config.placement is Placement.PLANAR
        assert config.width_mode.value == "legacy"

    def test_defaults(self):
        config = PipelineConfig()
        assert config.offset == (-20, 20)
        assert config.scan_width == 50
        assert config.cluster_size == 810
        assert config.hash_space_size == 2048
        assert config.admission_floor == 2048 - 810
        assert np.log2(config.hash_space_size).is_integer()
