"""Tests for deployment document rendering and patching."""

import pytest
import yaml

from nlcompute.configuration.generator import DocumentGenerator
from nlcompute.configuration.validator import YAMLValidator
from nlcompute.shared.schemas import JUPYTER_IMAGE, GPUSpec, ParameterSet, PortMapping
from nlcompute.shared.utils.param_merge import apply_defaults


@pytest.fixture
def generator():
    return DocumentGenerator()


@pytest.fixture
def validator():
    return YAMLValidator()


def _two_service_document() -> str:
    return yaml.dump(
        {
            "version": "1.0",
            "services": {
                "web": {"image": "nginx:latest", "expose": [], "env": []},
                "db": {"image": "postgres:16", "expose": [], "env": []},
            },
            "profiles": {
                "name": "web",
                "duration": "1d",
                "mode": "provider",
                "compute": {
                    "web": {"resources": {"cpu": {"units": 2}, "memory": {"size": "4Gi"}}},
                    "db": {"resources": {"cpu": {"units": 4}, "memory": {"size": "8Gi"}}},
                },
                "placement": {
                    "westcoast": {
                        "pricing": {
                            "web": {"token": "CST", "amount": 10},
                            "db": {"token": "CST", "amount": 20},
                        }
                    }
                },
            },
            "deployment": {
                "web": {"westcoast": {"profile": "web", "count": 1}},
                "db": {"westcoast": {"profile": "db", "count": 1}},
            },
        },
        sort_keys=False,
    )


@pytest.mark.unit
class TestRender:
    def test_render_defaults(self, generator, validator):
        content = generator.render(ParameterSet())
        config = yaml.safe_load(content)

        assert config["version"] == "1.0"
        assert config["services"]["py-cuda"]["image"] == JUPYTER_IMAGE
        assert config["services"]["py-cuda"]["env"] == ["JUPYTER_TOKEN=test"]
        pricing = config["profiles"]["placement"]["westcoast"]["pricing"]["py-cuda"]
        assert pricing == {"token": "CST", "amount": 15}
        assert config["deployment"]["py-cuda"]["westcoast"] == {"profile": "py-cuda", "count": 1}
        assert "gpu" not in config["profiles"]["compute"]["py-cuda"]["resources"]
        assert validator.validate_yaml(content) == (True, [])

    def test_render_is_deterministic(self, generator):
        params = apply_defaults(ParameterSet(cpu=8, duration="3h", amount=9))
        assert generator.render(params) == generator.render(params)

    def test_render_complete_set(self, generator, validator):
        params = apply_defaults(
            ParameterSet(
                cpu=8,
                memory="32Gi",
                storage="200Gi",
                gpu=GPUSpec(units=2, model="a100"),
                duration="3h",
                amount=9,
            )
        )
        config = yaml.safe_load(generator.render(params))
        resources = config["profiles"]["compute"]["py-cuda"]["resources"]

        assert resources["cpu"] == {"units": 8}
        assert resources["memory"] == {"size": "32Gi"}
        assert resources["storage"] == [{"size": "200Gi"}]
        assert resources["gpu"] == {
            "units": 2,
            "attributes": {"vendor": {"nvidia": [{"model": "a100"}]}},
        }
        assert config["profiles"]["duration"] == "3h"
        assert config["profiles"]["placement"]["westcoast"]["pricing"]["py-cuda"]["amount"] == 9

    def test_ports_and_env(self, generator):
        params = ParameterSet(
            name="web",
            image="nginx:latest",
            ports=[PortMapping(port=80), PortMapping(port=443, published_port=8443, global_routing=False)],
            env={},
        )
        service = yaml.safe_load(generator.render(params))["services"]["web"]

        assert service["expose"] == [
            {"port": 80, "as": 80, "to": [{"global": True}]},
            {"port": 443, "as": 8443, "to": [{"global": False}]},
        ]
        assert service["env"] == []

    def test_awkward_strings_stay_valid_yaml(self, generator):
        params = ParameterSet(name="my: svc", env={"MSG": 'say "hi" # now'})
        config = yaml.safe_load(generator.render(params))

        assert "my: svc" in config["services"]
        assert config["services"]["my: svc"]["env"] == ['MSG=say "hi" # now']


@pytest.mark.unit
class TestUpdate:
    def test_empty_patch_resets_token(self, generator):
        config = yaml.safe_load(generator.render(ParameterSet()))
        config["profiles"]["placement"]["westcoast"]["pricing"]["py-cuda"]["token"] = "ETH"

        updated = yaml.safe_load(generator.update(yaml.dump(config), ParameterSet()))

        pricing = updated["profiles"]["placement"]["westcoast"]["pricing"]["py-cuda"]
        assert pricing == {"token": "CST", "amount": 15}

    def test_patch_only_given_fields(self, generator):
        original = generator.render(ParameterSet(cpu=16, memory="64Gi"))
        updated = yaml.safe_load(generator.update(original, ParameterSet(cpu=4, amount=30)))

        resources = updated["profiles"]["compute"]["py-cuda"]["resources"]
        assert resources["cpu"] == {"units": 4}
        assert resources["memory"] == {"size": "64Gi"}
        assert updated["profiles"]["placement"]["westcoast"]["pricing"]["py-cuda"]["amount"] == 30

    def test_patch_keeps_document_valid(self, generator, validator):
        original = generator.render(ParameterSet())
        updated = generator.update(original, ParameterSet(duration="2d", gpu=GPUSpec(units=1, model="h100")))
        assert validator.validate_yaml(updated) == (True, [])

    def test_multi_service_without_name_renders_fresh(self, generator):
        updated = yaml.safe_load(generator.update(_two_service_document(), ParameterSet(cpu=8)))

        assert list(updated["services"]) == ["py-cuda"]
        assert updated["profiles"]["compute"]["py-cuda"]["resources"]["cpu"] == {"units": 8}

    def test_multi_service_with_name_patches_that_service(self, generator):
        params = ParameterSet(image="postgres:17", cpu=8, amount=25)
        updated = yaml.safe_load(generator.update(_two_service_document(), params, service_name="db"))

        assert updated["services"]["db"]["image"] == "postgres:17"
        assert updated["services"]["web"]["image"] == "nginx:latest"
        assert updated["profiles"]["compute"]["db"]["resources"]["cpu"] == {"units": 8}
        assert updated["profiles"]["compute"]["web"]["resources"]["cpu"] == {"units": 2}
        assert updated["profiles"]["placement"]["westcoast"]["pricing"]["db"]["amount"] == 25
        assert updated["profiles"]["placement"]["westcoast"]["pricing"]["web"]["amount"] == 10

    def test_unknown_service_name_renders_fresh(self, generator):
        updated = yaml.safe_load(
            generator.update(_two_service_document(), ParameterSet(), service_name="cache")
        )
        assert list(updated["services"]) == ["py-cuda"]

    @pytest.mark.parametrize("existing", ["services: [unclosed", "- just\n- a list\n", "services: 5\n"])
    def test_unusable_document_renders_fresh(self, generator, validator, existing):
        updated = generator.update(existing, ParameterSet(cpu=2))

        assert yaml.safe_load(updated)["profiles"]["compute"]["py-cuda"]["resources"]["cpu"] == {"units": 2}
        assert validator.validate_yaml(updated) == (True, [])
