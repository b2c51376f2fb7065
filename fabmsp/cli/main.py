import sys
import logging

from fabmsp.common.cfg import Config
from fabmsp.common.errors import FabMspError
from fabmsp.common.logs import Logs
from fabmsp.crypto.assembler import MspAssembler
from fabmsp.crypto.selector import newest_artifact
from fabmsp.crypto.types import InstanceType
from fabmsp.files.network import NetworkFiles
from fabmsp.cli.output import print_cli


logger = logging.getLogger(__name__)


INSTANCE_TYPES = [instance_type.value for instance_type in InstanceType]


class CLIRunner:
    def __init__(self, info):
        self.info = info
        self.files = NetworkFiles(info.get("root"), info.get("network"))
        self.assembler = MspAssembler(
            self.files.get_root_file_path(), admin_policy=info.get("admin_policy")
        )
        self.cmds = {
            "org": self.org,
            "orderer": self.orderer,
            "peer": self.peer,
            "user": self.user,
            "newest": self.newest,
        }
        logger.info("CLIRunner init")

    def get_cmds(self):
        return list(self.cmds.keys())

    def org(self, args):
        return self.assembler.format_org(args.org, args.client_id, args.type, args.hostname)

    def orderer(self, args):
        return self.assembler.format_orderer(args.org, args.name, args.hostname)

    def peer(self, args):
        return self.assembler.format_peer(args.org, args.name, args.hostname)

    def user(self, args):
        return self.assembler.format_user(args.org, args.name, args.type, args.hostname)

    def newest(self, args):
        return newest_artifact(args.folder).path

    def execute(self, args):
        logger.info(f"Executing command: {args.command}")
        func = self.cmds.get(args.command)
        return func(args)


def add_commands(parser):
    subparsers = parser.add_subparsers(dest="command", required=True)

    org = subparsers.add_parser("org", help="Format an organization MSP")
    org.add_argument("org", help="Organization name used at CA enrollment")
    org.add_argument("client_id", help="Enrolled identity whose msp seeds the org")
    org.add_argument("hostname", help="Organization domain")
    org.add_argument("--type", choices=INSTANCE_TYPES, default="peer")

    for node in ["orderer", "peer"]:
        node_parser = subparsers.add_parser(node, help=f"Format a {node} node MSP and TLS")
        node_parser.add_argument("org", help="Organization name used at CA enrollment")
        node_parser.add_argument("name", help=f"{node.capitalize()} node name")
        node_parser.add_argument("hostname", help="Organization domain")

    user = subparsers.add_parser("user", help="Format a user MSP")
    user.add_argument("org", help="Organization name used at CA enrollment")
    user.add_argument("name", help="User name")
    user.add_argument("hostname", help="Organization domain")
    user.add_argument("--type", choices=INSTANCE_TYPES, default="peer")

    newest = subparsers.add_parser("newest", help="Show the newest artifact of a folder")
    newest.add_argument("folder")


def main(argv=None):
    cfg = Config(description="fabmsp - Fabric MSP Assembler")
    add_commands(cfg.parser)

    if not cfg.parse(argv):
        return 1

    info = cfg.get()
    Logs(info.get("logs"), debug=info.get("debug"), screen=False)
    args = cfg.cfg

    runner = CLIRunner(info)
    try:
        output = runner.execute(args)
    except (FabMspError, OSError) as e:
        logger.info(f"Command {args.command} failed - exception: {repr(e)}")
        print_cli(None, err=str(e))
        return 1

    print_cli(output, style="normal")
    return 0


if __name__ == "__main__":
    sys.exit(main())
