import os
import re
import json
import base64
import shutil
import logging

import yaml
from dotenv import dotenv_values, set_key

from fabmsp.common.errors import EnvNotInitializedError, PackageIdNotFoundError
from fabmsp.crypto.paths import PathResolver
from fabmsp.crypto.selector import list_dir
from fabmsp.crypto.types import InstanceType


logger = logging.getLogger(__name__)


DOCKER_COMPOSE_FILE = re.compile(r"^docker-compose-(?P<name>.*)\.yaml$")


class NetworkFiles:
    """Read/write points for the files of one network folder."""

    def __init__(self, root, network):
        self.root = root
        self.network = network
        self.network_path = os.path.join(root, network)
        self.env_path = os.path.join(root, ".env")
        self.paths = PathResolver(self.network_path)

    def get_root_file_path(self):
        return self.network_path

    def _read(self, filepath):
        with open(filepath, "r") as f:
            return f.read()

    def _write(self, filepath, data):
        dirname = os.path.dirname(filepath)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        with open(filepath, "w") as f:
            f.write(data)
        logger.debug(f"write file ok {filepath}")

    def _write_yaml(self, filepath, data):
        self._write(filepath, yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    def get_env(self):
        if not os.path.isfile(self.env_path):
            raise EnvNotInitializedError(self.env_path)
        return dict(dotenv_values(self.env_path))

    def create_env(self, env):
        self._write(self.env_path, "")
        for key, value in env.items():
            set_key(self.env_path, key, str(value), quote_mode="never")
        logger.info(f"Env file created {self.env_path}")

    def create_network_folder(self):
        os.makedirs(self.network_path, exist_ok=True)

    def delete_network_folder(self):
        shutil.rmtree(self.network_path, ignore_errors=True)
        logger.info(f"Network folder deleted {self.network_path}")

    def create_ca_folder(self):
        os.makedirs(self.paths.ca_dir(), exist_ok=True)

    def _config_yaml_path(self, *names):
        return os.path.join(self.network_path, "config-yaml", *names)

    def create_crypto_config_yaml(self, crypto_config):
        self._write_yaml(self._config_yaml_path("crypto-config.yaml"), crypto_config)

    def create_configtx(self, configtx):
        self._write_yaml(self._config_yaml_path("configtx.yaml"), configtx)

    def create_configtx_orgs(self, configtx_orgs):
        self._write(self._config_yaml_path("configtxOrgs.json"), json.dumps(configtx_orgs))

    def get_configtx_orgs(self):
        return json.loads(self._read(self._config_yaml_path("configtxOrgs.json")))

    def create_channel_configtx(self, channel_name, configtx):
        self._write_yaml(
            self._config_yaml_path(f"{channel_name}Channel", "configtx.yaml"), configtx
        )

    def _node_tls_path(self, instance_type, hostname, domain, filename):
        node_dir = self.paths.node_dir(instance_type, domain, f"{hostname}.{domain}")
        return os.path.join(node_dir, "tls", filename)

    def get_orderer_server_cert_base64(self, hostname, domain):
        filepath = self._node_tls_path(InstanceType.ORDERER, hostname, domain, "server.crt")
        with open(filepath, "rb") as f:
            return base64.b64encode(f.read()).decode()

    def _copy_tls_ca(self, instance_type, hostname, domain):
        dst = os.path.join(self.network_path, "tlsca", f"{hostname}.{domain}", "ca.crt")
        os.makedirs(os.path.dirname(dst), exist_ok=True)
        shutil.copyfile(self._node_tls_path(instance_type, hostname, domain, "ca.crt"), dst)
        return dst

    def copy_orderer_org_tls_ca(self, hostname, domain):
        return self._copy_tls_ca(InstanceType.ORDERER, hostname, domain)

    def copy_peer_org_tls_ca(self, hostname, domain):
        return self._copy_tls_ca(InstanceType.PEER, hostname, domain)

    def get_peer_org_tls_cert_string(self, number, domain):
        return self._read(self._node_tls_path(InstanceType.PEER, f"peer{number}", domain, "ca.crt"))

    def get_peer_org_ca_cert_string(self, domain):
        return self._read(self.paths.org_ca_cert(InstanceType.PEER, domain))

    def _channel_path(self, channel_name, *names):
        return os.path.join(self.network_path, "channel-artifacts", channel_name, *names)

    def create_channel_folder(self, channel_name):
        os.makedirs(self._channel_path(channel_name), exist_ok=True)

    create_channel_artifact = create_channel_folder

    def get_channel_config_string(self, channel_name, filename):
        return self._read(self._channel_path(channel_name, f"{filename}.json"))

    def create_channel_config_json(self, channel_name, filename, channel_config_json):
        self._write(self._channel_path(channel_name, f"{filename}.json"), channel_config_json)

    def get_decoded_channel_config(self, channel_name):
        return json.loads(self.get_channel_config_string(channel_name, channel_name))

    def _org_json_path(self, filename):
        return os.path.join(self.network_path, "org-json", filename)

    def create_org_config_json(self, name, org_json):
        self._write(self._org_json_path(f"{name}.json"), org_json)

    def get_org_config_json(self, name):
        return self._read(self._org_json_path(f"{name}.json"))

    def create_orderer_org_consenter(self, name, consenter_json):
        self._write(self._org_json_path(f"{name}-consenter.json"), consenter_json)

    def get_orderer_org_consenter(self, name):
        return self._read(self._org_json_path(f"{name}-consenter.json"))

    def create_export_org_config_json(self, export_org_json, filepath):
        self._write(filepath, json.dumps(export_org_json))

    def create_connection_file(self, name, domain, connection_config):
        org_dir = self.paths.org_dir(InstanceType.PEER, domain)
        self._write(
            os.path.join(org_dir, f"connection-{name}.json"), json.dumps(connection_config)
        )
        self._write_yaml(os.path.join(org_dir, f"connection-{name}.yaml"), connection_config)

    def _docker_compose_dir(self):
        return os.path.join(self.network_path, "docker-compose")

    def get_docker_compose_yaml_path(self, hostname, instance_type):
        instance_type = InstanceType.parse(instance_type)
        return os.path.join(
            self._docker_compose_dir(),
            f"docker-compose-{instance_type.value}-{hostname}.yaml",
        )

    def create_docker_compose_yaml(self, hostname, instance_type, docker_compose):
        filepath = self.get_docker_compose_yaml_path(hostname, instance_type)
        self._write_yaml(filepath, docker_compose)
        return filepath

    def get_docker_compose_yaml(self, hostname, instance_type):
        filepath = self.get_docker_compose_yaml_path(hostname, instance_type)
        with open(filepath, "r") as f:
            return yaml.load(f, Loader=yaml.SafeLoader)

    def get_docker_compose_list(self):
        compose_list = {instance_type.value: [] for instance_type in InstanceType}

        for filename in list_dir(self._docker_compose_dir()):
            match = DOCKER_COMPOSE_FILE.match(filename)
            if not match:
                continue
            name = match.group("name")
            for instance_type in InstanceType:
                prefix = instance_type.value + "-"
                if name.startswith(prefix):
                    compose_list[instance_type.value].append(name[len(prefix):])
                    break

        return compose_list

    def get_explorer_root_file_path(self):
        return os.path.join(self.network_path, "fabric-explorer")

    def get_explorer_docker_compose_yaml_path(self):
        return os.path.join(self.get_explorer_root_file_path(), "docker-compose.yaml")

    def create_org_config_env(self, address, dot_env):
        self._write(os.path.join(self.network_path, "env", f"{address}.env"), dot_env)

    def create_chaincode_folder(self):
        os.makedirs(os.path.join(self.network_path, "chaincode"), exist_ok=True)

    def _package_id_path(self, chaincode_label):
        return os.path.join(self.network_path, "chaincode", "package-id", chaincode_label)

    def save_package_id(self, chaincode_label, package_id):
        self._write(self._package_id_path(chaincode_label), package_id)

    def get_package_id(self, chaincode_label):
        filepath = self._package_id_path(chaincode_label)
        if not os.path.isfile(filepath):
            raise PackageIdNotFoundError(chaincode_label)
        return self._read(filepath)
