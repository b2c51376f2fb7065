from enum import Enum


class InstanceType(Enum):
    CA = "ca"
    ORDERER = "orderer"
    PEER = "peer"

    @property
    def organizations_folder(self):
        return self.value + "Organizations"

    @property
    def nodes_folder(self):
        return self.value + "s"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


NODE_TYPES = (InstanceType.ORDERER, InstanceType.PEER)


class AdminCertPolicy(Enum):
    """Which users get their signing cert into the org msp/admincerts."""

    ALL_USERS = "all-users"
    ADMINS_ONLY = "admins-only"


def is_admin_name(name):
    return name.lower().startswith("admin")
