"""
Deployer facade: service wiring and failure reporting
"""

import pytest

from slugpush.api import Deployer
from slugpush.api.exceptions import ConfigError
from slugpush.core.event_bus import EventRecorder
from slugpush.models import EventType, ServiceSettings
from slugpush.services import DeployService


class TestDeployer:
    @pytest.mark.asyncio
    async def test_unknown_storage_type_is_a_failed_result(self, options, bus):
        recorder = EventRecorder(bus)
        deployer = Deployer(settings=ServiceSettings(storage_type="s3"), event_bus=bus)

        result = await deployer.deploy_async(options)

        assert not result.is_success
        assert isinstance(result.error, ConfigError)
        assert result.errors[0].code == "SP001"
        assert "Unsupported storage type: s3" in result.message
        assert recorder.payloads(EventType.DEPLOY_ERROR) == [result.message]

    @pytest.mark.asyncio
    async def test_unknown_cache_type_is_a_failed_result(self, options, bus):
        deployer = Deployer(settings=ServiceSettings(cache_type="redis"), event_bus=bus)

        result = await deployer.deploy_workspace_async(options)

        assert isinstance(result.error, ConfigError)
        assert result.duration is not None

    @pytest.mark.asyncio
    async def test_workspace_deploy_through_service_factory(self, options, platform, build_service,
                                                            storage, cache, bus):
        deployer = Deployer(
            event_bus=bus,
            service_factory=lambda opts: DeployService(platform, build_service, storage, cache, event_bus=bus),
        )

        result = await deployer.deploy_workspace_async(options, procfile_path="Procfile")

        assert result.is_success
        assert result.bundle_size > 0
        assert len(platform.releases) == 1
        assert platform.procfiles[0] is not None

    @pytest.mark.asyncio
    async def test_options_from_keyword_arguments(self, workspace, platform, build_service, storage, cache, bus):
        seen = []

        def factory(opts):
            seen.append(opts)
            return DeployService(platform, build_service, storage, cache, event_bus=bus)

        result = await Deployer(service_factory=factory).deploy_async(
            workspace, api_key="secret-key", app_name="my-app"
        )

        assert result.is_success
        assert seen[0].base_dir == str(workspace)
        assert seen[0].app_name == "my-app"
