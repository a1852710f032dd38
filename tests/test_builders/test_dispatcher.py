"""Tests for build dispatch."""

from unittest.mock import AsyncMock, patch

import pytest

from swarmdeploy.builders.base import BuildType
from swarmdeploy.builders.buildpacks import HerokuStrategy, NixpacksStrategy, PaketoStrategy
from swarmdeploy.builders.dispatcher import STRATEGY_CLASSES, BuildDispatcher, check_exhaustive
from swarmdeploy.builders.dockerfile import DockerfileStrategy, StaticStrategy
from swarmdeploy.errors import BuildError
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.utils.deploy_log import DeploymentLog


@pytest.fixture
def dispatcher(tmp_path):
    return BuildDispatcher(tmp_path / "applications")


@pytest.fixture
def log(tmp_path):
    deployment_log = DeploymentLog(tmp_path / "logs" / "build.log")
    yield deployment_log
    deployment_log.close()


class TestExhaustiveness:
    """Every build type has exactly one handler."""

    def test_registered_strategies_are_exhaustive(self):
        check_exhaustive(STRATEGY_CLASSES)
        assert set(STRATEGY_CLASSES) == set(BuildType) - {BuildType.NONE}

    def test_missing_handler_fails(self, tmp_path):
        classes = dict(STRATEGY_CLASSES)
        del classes[BuildType.STATIC]

        with pytest.raises(RuntimeError, match="static"):
            BuildDispatcher(tmp_path, strategy_classes=classes)

    def test_mismatched_handler_fails(self):
        classes = dict(STRATEGY_CLASSES)
        classes[BuildType.HEROKU_BUILDPACKS] = PaketoStrategy

        with pytest.raises(RuntimeError, match="PaketoStrategy"):
            check_exhaustive(classes)

    @pytest.mark.parametrize(
        "build_type,strategy_class",
        [
            ("nixpacks", NixpacksStrategy),
            ("heroku_buildpacks", HerokuStrategy),
            ("paketo_buildpacks", PaketoStrategy),
            ("dockerfile", DockerfileStrategy),
            ("static", StaticStrategy),
        ],
    )
    def test_tag_maps_to_strategy(self, dispatcher, build_type, strategy_class):
        assert type(dispatcher.get_strategy(build_type)) is strategy_class

    @pytest.mark.parametrize("build_type", ["none", "railpack", ""])
    def test_unknown_or_none_has_no_strategy(self, dispatcher, build_type):
        assert dispatcher.get_strategy(build_type) is None


class TestGetBuildCommand:
    """Test get_build_command."""

    def test_every_build_type_describes_a_command(self, dispatcher):
        for build_type in STRATEGY_CLASSES:
            app = ApplicationSpec(app_name="api", build_type=build_type.value)
            command = dispatcher.get_build_command(app, "/tmp/api.log")

            assert command.build_type is build_type
            assert command.log_path == "/tmp/api.log"
            assert command.as_shell().endswith(">> /tmp/api.log 2>&1")

    def test_none_build_type(self, dispatcher):
        app = ApplicationSpec(app_name="api", build_type="none")
        assert dispatcher.get_build_command(app) is None


@pytest.mark.asyncio
class TestDispatchBuild:
    """Test dispatch_build."""

    async def test_runs_matching_strategy(self, dispatcher, log):
        app = ApplicationSpec(app_name="api", build_type="paketo_buildpacks")

        with patch("swarmdeploy.builders.base.stream_command", new_callable=AsyncMock) as mock_stream:
            mock_stream.return_value = 0
            built = await dispatcher.dispatch_build(app, log)

        assert built is True
        argv = mock_stream.call_args[0][0]
        assert argv[:3] == ["pack", "build", "api"]
        assert "paketobuildpacks/builder-jammy-full" in argv

    async def test_docker_source_skips_build(self, dispatcher, log):
        app = ApplicationSpec(app_name="web", source_type="docker", docker_image="nginx")

        with patch("swarmdeploy.builders.base.stream_command", new_callable=AsyncMock) as mock_stream:
            built = await dispatcher.dispatch_build(app, log)

        assert built is False
        mock_stream.assert_not_called()

    async def test_none_skips_build(self, dispatcher, log):
        app = ApplicationSpec(app_name="api", build_type="none")

        with patch("swarmdeploy.builders.base.stream_command", new_callable=AsyncMock) as mock_stream:
            assert await dispatcher.dispatch_build(app, log) is False

        mock_stream.assert_not_called()

    async def test_failed_build_raises(self, dispatcher, log):
        app = ApplicationSpec(app_name="api", build_type="nixpacks")

        with patch("swarmdeploy.builders.base.stream_command", new_callable=AsyncMock) as mock_stream:
            mock_stream.return_value = 2
            with pytest.raises(BuildError) as exc_info:
                await dispatcher.dispatch_build(app, log)

        assert exc_info.value.build_type == "nixpacks"
        assert "exit code 2" in str(exc_info.value)

    async def test_missing_tool_raises_build_error(self, dispatcher, log):
        app = ApplicationSpec(app_name="api", build_type="heroku_buildpacks")

        with patch("swarmdeploy.builders.base.stream_command", new_callable=AsyncMock) as mock_stream:
            mock_stream.side_effect = FileNotFoundError("pack")
            with pytest.raises(BuildError, match="could not be started"):
                await dispatcher.dispatch_build(app, log)
