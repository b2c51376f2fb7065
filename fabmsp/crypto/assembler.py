import os
import shutil
import logging
import threading
import weakref

import yaml

from fabmsp.common.errors import MissingPrerequisiteError
from fabmsp.crypto.paths import PathResolver
from fabmsp.crypto.selector import list_dir, newest_artifact
from fabmsp.crypto.types import (
    InstanceType,
    AdminCertPolicy,
    NODE_TYPES,
    is_admin_name,
)


logger = logging.getLogger(__name__)


NODE_OUS_CONFIG = {
    "NodeOUs": {
        "Enable": True,
        "ClientOUIdentifier": {"OrganizationalUnitIdentifier": "client"},
        "PeerOUIdentifier": {"OrganizationalUnitIdentifier": "peer"},
        "AdminOUIdentifier": {"OrganizationalUnitIdentifier": "admin"},
        "OrdererOUIdentifier": {"OrganizationalUnitIdentifier": "orderer"},
    }
}

MSP_TRUST_FOLDERS = ["admincerts", "tlscacerts", "tlsintermediatecerts"]


class MspAssembler:
    """Turns raw CA issuance output into MSP directories.

    Organizations are expected first, then their nodes and users. Admin
    signing certs are pushed to existing nodes when a user is formatted and
    pulled from existing users when a node is formatted, so both orders end
    with the same admincerts.
    """

    # a lock lives only while some assembly holds it
    _org_locks = weakref.WeakValueDictionary()
    _org_locks_guard = threading.Lock()

    def __init__(self, root, admin_policy=AdminCertPolicy.ALL_USERS):
        self.paths = PathResolver(root)
        self.admin_policy = AdminCertPolicy(admin_policy)

    def org_lock(self, org_dir):
        key = os.path.abspath(org_dir)
        with MspAssembler._org_locks_guard:
            lock = MspAssembler._org_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                MspAssembler._org_locks[key] = lock
            return lock

    def _make_dirs(self, *dirs):
        for dirname in dirs:
            os.makedirs(dirname, exist_ok=True)

    def _copy_tree(self, src, dst):
        if not os.path.isdir(src):
            raise MissingPrerequisiteError(src)
        logger.debug(f"Copying folder {src} into {dst}")
        shutil.copytree(src, dst, dirs_exist_ok=True)

    def _copy_admin_certs(self, owner, signcerts, admincerts):
        # CA enrollments all name their cert cert.pem, the owner prefix keeps them apart
        if not os.path.isdir(signcerts):
            raise MissingPrerequisiteError(signcerts)
        os.makedirs(admincerts, exist_ok=True)
        for name in list_dir(signcerts):
            src = os.path.join(signcerts, name)
            if os.path.isfile(src):
                shutil.copy2(src, os.path.join(admincerts, f"{owner}-{name}"))
        logger.debug(f"Admin certs of {owner} copied into {admincerts}")

    def _copy_newest(self, folder, dst):
        if not os.path.isdir(folder):
            raise MissingPrerequisiteError(folder)
        artifact = newest_artifact(folder)
        os.makedirs(os.path.dirname(dst), exist_ok=True)
        logger.debug(f"Deriving {dst} from {artifact.path}")
        shutil.copy2(artifact.path, dst)
        return artifact

    def _write_node_ous(self, msp_dir):
        filepath = os.path.join(msp_dir, "config.yaml")
        with open(filepath, "w") as f:
            yaml.safe_dump(NODE_OUS_CONFIG, f, default_flow_style=False, sort_keys=False)

    def format_org(self, org_name, client_id, instance_type, hostname):
        """Builds the organization MSP from the staged msp of client_id."""
        org_dir = self.paths.org_dir(instance_type, hostname)
        msp_dir = os.path.join(org_dir, "msp")
        ca_dir = os.path.join(org_dir, "ca")

        with self.org_lock(org_dir):
            self._make_dirs(ca_dir, *[os.path.join(msp_dir, f) for f in MSP_TRUST_FOLDERS])

            staged_msp = os.path.join(self.paths.issuance_dir(client_id, org_name), "msp")
            self._copy_tree(staged_msp, msp_dir)

            self._copy_newest(
                os.path.join(msp_dir, "cacerts"),
                os.path.join(msp_dir, "tlscacerts", f"tlsca.{hostname}-cert.pem"),
            )
            self._copy_tree(
                os.path.join(msp_dir, "intermediatecerts"),
                os.path.join(msp_dir, "tlsintermediatecerts"),
            )
            self._copy_newest(
                os.path.join(msp_dir, "intermediatecerts"),
                self.paths.org_ca_cert(instance_type, hostname),
            )

            self._write_node_ous(msp_dir)

        logger.info(f"Organization MSP formatted {org_dir}")
        return org_dir

    def format_orderer(self, org_name, orderer_name, hostname):
        return self.format_node(InstanceType.ORDERER, org_name, orderer_name, hostname)

    def format_peer(self, org_name, peer_name, hostname):
        return self.format_node(InstanceType.PEER, org_name, peer_name, hostname)

    def format_node(self, instance_type, org_name, node_name, hostname):
        instance_type = InstanceType.parse(instance_type)
        if instance_type not in NODE_TYPES:
            raise ValueError(f"Node type must be one of {NODE_TYPES}, not {instance_type}")

        org_dir = self.paths.org_dir(instance_type, hostname)
        node_dir = self.paths.node_dir(instance_type, hostname, node_name)
        msp_dir = os.path.join(node_dir, "msp")
        tls_dir = os.path.join(node_dir, "tls")

        with self.org_lock(org_dir):
            self._make_dirs(*[os.path.join(msp_dir, f) for f in MSP_TRUST_FOLDERS])

            self._copy_tree(self.paths.issuance_dir(node_name, org_name), node_dir)

            # nodes keep the whole CA chain for mutual TLS
            self._copy_tree(
                os.path.join(msp_dir, "cacerts"), os.path.join(msp_dir, "tlscacerts")
            )
            self._copy_tree(
                os.path.join(msp_dir, "intermediatecerts"),
                os.path.join(msp_dir, "tlsintermediatecerts"),
            )

            self._copy_newest(
                os.path.join(tls_dir, "tlsintermediatecerts"),
                os.path.join(tls_dir, "ca.crt"),
            )
            self._copy_newest(
                os.path.join(tls_dir, "signcerts"), os.path.join(tls_dir, "server.crt")
            )
            self._copy_newest(
                os.path.join(tls_dir, "keystore"), os.path.join(tls_dir, "server.key")
            )

            self._pull_admin_certs(instance_type, hostname, msp_dir)

        logger.info(f"{instance_type.value.capitalize()} node formatted {node_dir}")
        return node_dir

    def _pull_admin_certs(self, instance_type, hostname, msp_dir):
        for user in list_dir(self.paths.users_dir(instance_type, hostname)):
            if is_admin_name(user):
                signcerts = os.path.join(
                    self.paths.user_msp_dir(instance_type, hostname, user), "signcerts"
                )
                if not os.path.isdir(signcerts):
                    logger.debug(f"Admin {user} has no signcerts yet, skipped")
                    continue
                self._copy_admin_certs(user, signcerts, os.path.join(msp_dir, "admincerts"))

    def format_user(self, org_name, user_name, instance_type, hostname):
        """Builds users/<user_name>/msp and spreads its signing cert.

        The cert lands in the user's own admincerts, in the org admincerts
        according to the admin policy and, for admin users, in the admincerts
        of every node of the same type already formatted.
        """
        instance_type = InstanceType.parse(instance_type)
        org_dir = self.paths.org_dir(instance_type, hostname)
        user_dir = self.paths.user_dir(instance_type, hostname, user_name)
        user_msp_dir = os.path.join(user_dir, "msp")
        signcerts = os.path.join(user_msp_dir, "signcerts")
        admin = is_admin_name(user_name)

        staged_user = self.paths.issuance_dir(user_name, org_name, user=True)
        if not os.path.isdir(staged_user):
            raise MissingPrerequisiteError(staged_user)

        with self.org_lock(org_dir):
            self._make_dirs(user_dir)

            self._copy_tree(staged_user, user_msp_dir)

            if admin or self.admin_policy is AdminCertPolicy.ALL_USERS:
                self._copy_admin_certs(
                    user_name,
                    signcerts,
                    os.path.join(self.paths.org_msp_dir(instance_type, hostname), "admincerts"),
                )

            self._copy_admin_certs(
                user_name, signcerts, os.path.join(user_msp_dir, "admincerts")
            )

            if admin and instance_type in NODE_TYPES:
                nodes_dir = self.paths.nodes_dir(instance_type, hostname)
                for node in list_dir(nodes_dir):
                    if not os.path.isdir(os.path.join(nodes_dir, node)):
                        continue
                    node_admincerts = os.path.join(nodes_dir, node, "msp", "admincerts")
                    self._copy_admin_certs(user_name, signcerts, node_admincerts)

        logger.info(f"User MSP formatted {user_msp_dir}")
        return user_msp_dir
