"""Tests for the creation request builder."""

import pytest

from lxcspawn.errors import ValidationError
from lxcspawn.models.container import ContainerSpec
from lxcspawn.proxmox.builder import build_request, format_value


ALWAYS_EMITTED = {"unprivileged", "onboot", "start", "protection"}


def make_spec(**overrides):
    data = {
        "node": "pve",
        "template": "local:vztmpl/x.tar.zst",
        "resources": {"memory": 1024},
    }
    data.update(overrides)
    return ContainerSpec(**data)


class TestBuildRequest:
    """Test build_request."""

    def test_minimal_spec(self, minimal_spec, credentials):
        """Test the parameters produced for a spec with only required fields."""
        request = build_request(minimal_spec, 100, credentials)
        params = request.as_dict()

        expected = {
            "vmid": "100",
            "ostemplate": "local:vztmpl/x.tar.zst",
            "memory": "1024",
            "swap": "512",
            "cores": "1",
            "rootfs": "local-lvm:8",
            "net0": "name=eth0,bridge=vmbr0,ip=dhcp",
            "unprivileged": "true",
            "onboot": "false",
            "start": "false",
            "protection": "false",
        }
        for key, value in expected.items():
            assert params[key] == value

    def test_minimal_spec_encoded(self, minimal_spec, credentials):
        """Test the form body for a minimal spec."""
        body = build_request(minimal_spec, 100, credentials).encode()
        pairs = body.split("&")

        assert "rootfs=local-lvm:8" in pairs
        assert "net0=name=eth0,bridge=vmbr0,ip=dhcp" in pairs
        assert "ostemplate=local:vztmpl/x.tar.zst" in pairs
        assert "unprivileged=true" in pairs

    def test_absent_fields_omitted(self, minimal_spec, credentials):
        """Test that unset optional fields produce no parameter."""
        request = build_request(minimal_spec, 100, credentials)

        for key in ("hostname", "password", "ssh-public-keys", "cpulimit",
                    "nameserver", "searchdomain", "tags", "description"):
            assert key not in request
        assert all(value != "" for _, value in request.params)
        assert not any(key.startswith("mp") for key in request.keys())

    def test_parameter_order(self, minimal_spec, credentials):
        """Test that the identifier and template come first."""
        request = build_request(minimal_spec, 100, credentials)

        assert request.keys()[:2] == ("vmid", "ostemplate")

    def test_deterministic(self, credentials):
        """Test that identical inputs give identical output."""
        spec = make_spec(
            hostname="web01",
            network=[{"name": "eth0"}, {"name": "eth1", "ip": "10.0.0.5/24"}],
            description="Web server",
        )

        first = build_request(spec, 150, credentials)
        second = build_request(spec, 150, credentials)

        assert first == second
        assert first.encode() == second.encode()

    def test_static_ip_without_gateway(self, credentials):
        """Test that no gw attribute is emitted without a gateway."""
        spec = make_spec(network=[{"name": "eth0", "ip": "10.0.0.5/24"}])

        net0 = build_request(spec, 100, credentials).get("net0")

        assert net0 == "name=eth0,bridge=vmbr0,ip=10.0.0.5/24"
        assert "gw=" not in net0

    def test_static_ip_with_gateway(self, credentials):
        """Test the full attribute order of an interface."""
        spec = make_spec(network=[{
            "name": "eth0",
            "bridge": "vmbr1",
            "ip": "10.0.0.5/24",
            "gateway": "10.0.0.1",
            "firewall": True,
        }])

        net0 = build_request(spec, 100, credentials).get("net0")

        assert net0 == "name=eth0,bridge=vmbr1,ip=10.0.0.5/24,gw=10.0.0.1,firewall=true"

    def test_dhcp_ignores_gateway(self, credentials):
        """Test that a gateway is dropped for DHCP interfaces."""
        spec = make_spec(network=[{"name": "eth0", "gateway": "10.0.0.1"}])

        net0 = build_request(spec, 100, credentials).get("net0")

        assert net0 == "name=eth0,bridge=vmbr0,ip=dhcp"

    def test_multiple_interfaces(self, credentials):
        """Test positional interface keys."""
        spec = make_spec(network=[
            {"name": "eth0"},
            {"name": "eth1", "bridge": "vmbr2", "firewall": False},
        ])

        request = build_request(spec, 100, credentials)

        assert request.get("net0") == "name=eth0,bridge=vmbr0,ip=dhcp"
        assert request.get("net1") == "name=eth1,bridge=vmbr2,ip=dhcp,firewall=false"
        assert "net2" not in request

    def test_mountpoints(self, credentials):
        """Test positional mount point keys."""
        spec = make_spec(mountpoints=[
            {"storage": "local-lvm", "size": 32, "path": "/data", "backup": True},
            {"storage": "tank", "size": 0.5, "path": "/cache"},
        ])

        request = build_request(spec, 100, credentials)

        assert request.get("mp0") == "local-lvm:32,mp=/data,backup=true"
        assert request.get("mp1") == "tank:0.5,mp=/cache"

    def test_root_storage(self, credentials):
        """Test that the root disk is independent of mount points."""
        spec = make_spec(
            storage={"storage": "fast", "size": 20},
            mountpoints=[{"storage": "tank", "size": 100, "path": "/srv"}],
        )

        assert build_request(spec, 100, credentials).get("rootfs") == "fast:20"

    def test_options_always_emitted(self, credentials):
        """Test that boolean options appear with explicit values."""
        spec = make_spec(options={"unprivileged": False, "onboot": True})

        request = build_request(spec, 100, credentials)

        assert request.get("unprivileged") == "false"
        assert request.get("onboot") == "true"
        assert request.get("start") == "false"
        assert request.get("protection") == "false"

    def test_secret_interpolation(self, credentials):
        """Test that a reference is replaced by its secret."""
        spec = make_spec(password="${FOO}")

        assert build_request(spec, 100, credentials).get("password") == "bar"

    def test_unset_secret_omitted(self, credentials):
        """Test that an unset reference omits the field entirely."""
        spec = make_spec(password="${BAZ}", hostname="${EMPTY}")

        request = build_request(spec, 100, credentials)

        assert "password" not in request
        assert "hostname" not in request
        assert "${BAZ}" not in request.encode()

    def test_template_copied_verbatim(self, credentials):
        """Test that the template is not interpolated."""
        spec = make_spec(template="${FOO}")

        assert build_request(spec, 100, credentials).get("ostemplate") == "${FOO}"

    def test_ssh_keys_encoded(self, credentials):
        """Test that keys are newline-joined and percent-encoded."""
        spec = make_spec(ssh_keys="ssh-ed25519 AAAA+/= a@b\nssh-rsa BBBB c@d")

        request = build_request(spec, 100, credentials)
        body = request.encode()

        assert request.get("ssh-public-keys") == "ssh-ed25519 AAAA+/= a@b\nssh-rsa BBBB c@d"
        assert "ssh-public-keys=ssh-ed25519%20AAAA%2B%2F%3D%20a%40b%0Assh-rsa%20BBBB%20c%40d" in body

    def test_ssh_keys_from_secret(self, credentials):
        """Test that a key line may reference a secret."""
        spec = make_spec(ssh_keys="${FOO}\n${BAZ}\nssh-rsa BBBB c@d")

        request = build_request(spec, 100, credentials)

        assert request.get("ssh-public-keys") == "bar\nssh-rsa BBBB c@d"

    def test_description_encoded(self, credentials):
        """Test that reserved characters in descriptions are escaped."""
        spec = make_spec(description="Web & proxy = fun")

        body = build_request(spec, 100, credentials).encode()

        assert "description=Web%20%26%20proxy%20%3D%20fun" in body.split("&")

    def test_optional_fields(self, credentials):
        """Test optional scalar fields."""
        spec = make_spec(
            hostname="web01",
            resources={"memory": 512, "cpulimit": 1.5, "cpuunits": 2048},
            dns={"nameserver": "1.1.1.1", "searchdomain": "lan"},
            tags="web;prod",
        )

        params = build_request(spec, 100, credentials).as_dict()

        assert params["hostname"] == "web01"
        assert params["cpulimit"] == "1.5"
        assert params["cpuunits"] == "2048"
        assert params["nameserver"] == "1.1.1.1"
        assert params["searchdomain"] == "lan"
        assert params["tags"] == "web;prod"

    def test_redacted(self, credentials):
        """Test that previews mask the password."""
        spec = make_spec(password="${ROOT_PASSWORD}")

        request = build_request(spec, 100, credentials)

        assert request.redacted()["password"] == "********"
        assert request.get("password") == "hunter2"

    def test_redacted_secret_references(self, credentials):
        """Test that any value taken from a secret is masked."""
        spec = make_spec(
            hostname="web01",
            description="${FOO}",
            tags="${ROOT_PASSWORD}",
            ssh_keys="${FOO}\nssh-rsa BBBB c@d",
        )

        request = build_request(spec, 100, credentials)
        redacted = request.redacted()

        assert redacted["description"] == "********"
        assert redacted["tags"] == "********"
        assert redacted["ssh-public-keys"] == "********"
        assert redacted["hostname"] == "web01"
        assert request.get("description") == "bar"
        assert "hunter2" not in str(redacted)

    @pytest.mark.parametrize("vmid", [0, 99, -1, True, "100", None])
    def test_invalid_vmid(self, minimal_spec, credentials, vmid):
        """Test that the identifier must be a valid container ID."""
        with pytest.raises(ValidationError):
            build_request(minimal_spec, vmid, credentials)


class TestFormatValue:
    """Test format_value."""

    def test_values(self):
        """Test rendering of API values."""
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value(8.0) == "8"
        assert format_value(2.5) == "2.5"
        assert format_value(512) == "512"
        assert format_value("dhcp") == "dhcp"
