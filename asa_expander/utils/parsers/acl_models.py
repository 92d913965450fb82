"""
Pydantic models for parsed access-list entries and service objects.

Absent optional fields are empty strings so entries can be rebuilt by
joining fields in grammar order.
"""
from pydantic import BaseModel


class AccessListEntry(BaseModel):
    """Structured representation of an extended access-list entry."""
    name: str = ""
    action: str = ""  # "permit" / "deny"
    proto: str = ""
    user: str = ""
    securitys: str = ""  # source security group
    source: str = ""
    securityd: str = ""  # destination security group
    destination: str = ""
    ports: str = ""
    options: str = ""


class ServiceObjectRecord(BaseModel):
    """
    One member of an object-group service.

    Exactly one of ``tcpudp``, ``icmp`` or ``proto`` is set on a parsed
    record; an unparseable member leaves all fields empty.
    """
    tcpudp: str = ""  # tcp, udp or tcp-udp
    source: str = ""  # source port clause, e.g. "eq 1024"
    destination: str = ""  # destination port clause, e.g. "range 80 81"
    icmp: str = ""  # icmp or icmp6
    type_code: str = ""  # icmp type and optional code
    proto: str = ""  # any other protocol, no ports

    @property
    def is_structural(self) -> bool:
        """True when the member carries qualifiers that must be placed at fixed ACE positions."""
        if self.icmp:
            return True
        if self.tcpudp == "tcp-udp":
            return True
        return bool(self.tcpudp and (self.source or self.destination))
