import logging
import unittest

from fabmsp.crypto.paths import PathResolver
from fabmsp.crypto.types import InstanceType, is_admin_name


class TestPathResolver(unittest.TestCase):
    def setUp(self):
        self.paths = PathResolver("/net")

    def test_org_dir(self):
        assert self.paths.org_dir(InstanceType.PEER, "org1.example.com") == (
            "/net/peerOrganizations/org1.example.com"
        )
        assert self.paths.org_dir("orderer", "example.com") == (
            "/net/ordererOrganizations/example.com"
        )
        assert self.paths.org_dir("ca", "ca.example.com") == (
            "/net/caOrganizations/ca.example.com"
        )

    def test_node_and_user_dirs(self):
        assert self.paths.node_dir("peer", "org1.com", "peer0.org1.com") == (
            "/net/peerOrganizations/org1.com/peers/peer0.org1.com"
        )
        assert self.paths.node_dir(InstanceType.ORDERER, "ord.com", "orderer0.ord.com") == (
            "/net/ordererOrganizations/ord.com/orderers/orderer0.ord.com"
        )
        assert self.paths.user_msp_dir("peer", "org1.com", "Admin") == (
            "/net/peerOrganizations/org1.com/users/Admin/msp"
        )

    def test_issuance_dirs(self):
        assert self.paths.issuance_dir("peer0.org1.com", "org1") == "/net/ca/peer0.org1.com@org1"
        assert self.paths.issuance_dir("User1", "org1", user=True) == "/net/ca/User1@org1/user"

    def test_org_ca_cert(self):
        assert self.paths.org_ca_cert("peer", "org1.com") == (
            "/net/peerOrganizations/org1.com/ca/ca.org1.com-cert.pem"
        )

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            self.paths.org_dir("client", "org1.com")

    def test_admin_name(self):
        assert is_admin_name("Admin")
        assert is_admin_name("ADMIN2")
        assert not is_admin_name("User1")
        assert not is_admin_name("sysadmin")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    unittest.main()
