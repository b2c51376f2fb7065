import os

from fabmsp.crypto.types import InstanceType


class PathResolver:
    """Maps names onto the crypto material layout of one network.

    Paths are only joined, never checked against the filesystem.
    """

    def __init__(self, root):
        self.root = root

    def ca_dir(self):
        return os.path.join(self.root, "ca")

    def issuance_dir(self, identity, org_name, user=False):
        identity_dir = os.path.join(self.ca_dir(), f"{identity}@{org_name}")
        if user:
            return os.path.join(identity_dir, "user")
        return identity_dir

    def org_dir(self, instance_type, hostname):
        instance_type = InstanceType.parse(instance_type)
        return os.path.join(self.root, instance_type.organizations_folder, hostname)

    def org_msp_dir(self, instance_type, hostname):
        return os.path.join(self.org_dir(instance_type, hostname), "msp")

    def org_ca_cert(self, instance_type, hostname):
        return os.path.join(
            self.org_dir(instance_type, hostname), "ca", f"ca.{hostname}-cert.pem"
        )

    def nodes_dir(self, instance_type, hostname):
        instance_type = InstanceType.parse(instance_type)
        return os.path.join(
            self.org_dir(instance_type, hostname), instance_type.nodes_folder
        )

    def node_dir(self, instance_type, hostname, node_name):
        return os.path.join(self.nodes_dir(instance_type, hostname), node_name)

    def users_dir(self, instance_type, hostname):
        return os.path.join(self.org_dir(instance_type, hostname), "users")

    def user_dir(self, instance_type, hostname, user_name):
        return os.path.join(self.users_dir(instance_type, hostname), user_name)

    def user_msp_dir(self, instance_type, hostname, user_name):
        return os.path.join(self.user_dir(instance_type, hostname, user_name), "msp")
