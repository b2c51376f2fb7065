import os
import logging
import argparse
import yaml

logger = logging.getLogger(__name__)


DEFAULTS = {
    "root": os.path.join(os.path.expanduser("~"), ".fabmsp"),
    "network": "fabmsp-network",
    "admin_policy": "all-users",
    "debug": False,
    "logs": "/tmp/fabmsp/logs/fabmsp.log",
}

ADMIN_POLICIES = ["all-users", "admins-only"]


class Config:
    def __init__(self, description="Fabric MSP Assembler"):
        self._info = None
        self.cfg = {}
        self.parser = argparse.ArgumentParser(description=description)

    def get(self):
        return self._info

    def get_cfg_attrib(self, name):
        try:
            value = getattr(self.cfg, name)
        except AttributeError as e:
            logger.debug(f"Argparser attrib name not found - exception {e}")
            value = None
        return value

    def load(self, filename):
        data = {}
        with open(filename, "r") as f:
            data = yaml.load(f, Loader=yaml.SafeLoader)
        return data or {}

    def add_arguments(self):
        self.parser.add_argument(
            "--config",
            type=str,
            help="Define a YAML file with the app settings (default: None)",
        )

        self.parser.add_argument(
            "--root",
            type=str,
            help="Define the folder holding .env and the networks (default: ~/.fabmsp)",
        )

        self.parser.add_argument(
            "--network",
            type=str,
            help="Define the network name (default: fabmsp-network)",
        )

        self.parser.add_argument(
            "--admin-policy",
            dest="admin_policy",
            type=str,
            choices=ADMIN_POLICIES,
            help="Define which users get trusted in the org admincerts (default: all-users)",
        )

        self.parser.add_argument(
            "--logs",
            type=str,
            help="Define the log file path (default: /tmp/fabmsp/logs/fabmsp.log)",
        )

        self.parser.add_argument(
            "--debug",
            action="store_true",
            default=None,
            help="Define the app logging mode (default: False)",
        )

    def parse(self, argv=None):
        self.add_arguments()
        self.cfg = self.parser.parse_args(argv)

        info = self.check()
        if info:
            self._info = info
            return True

        return False

    def cfg_args(self):
        cfg_file = self.get_cfg_attrib("config")
        if cfg_file:
            cfg_data = self.load(cfg_file)
            return cfg_data
        return None

    def check(self):
        info = dict(DEFAULTS)

        try:
            cfg_data = self.cfg_args()
        except (OSError, yaml.YAMLError) as e:
            print(f"Config file could not be loaded - exception {e}")
            return None

        if cfg_data:
            unknown = set(cfg_data) - set(DEFAULTS)
            if unknown:
                logger.debug(f"Ignoring unknown config file keys {sorted(unknown)}")
            info.update({k: v for k, v in cfg_data.items() if k in DEFAULTS})

        for name in DEFAULTS:
            value = self.get_cfg_attrib(name)
            if value is not None:
                info[name] = value

        if info.get("admin_policy") not in ADMIN_POLICIES:
            print(
                f"App cfg args not OK: admin_policy {info.get('admin_policy')} "
                f"not in {ADMIN_POLICIES}"
            )
            return None

        if not info.get("network"):
            print("App cfg args not OK: network name must not be empty")
            return None

        info["root"] = os.path.expanduser(info["root"])
        return info
