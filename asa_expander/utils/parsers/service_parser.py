"""
Parser for members of an ``object-group service`` (and ``object service`` bodies).
"""
from asa_expander.utils.parsers.acl_models import ServiceObjectRecord
from asa_expander.utils.parsers.grammar import after, anything, match_fields, optional, seq, word, alt

port_clause = alt(
    seq(word("eq", "gt", "lt", "neq"), anything()),
    seq(word("range"), anything(), anything()),
)

TCPUDP_FIELDS = (
    ("tcpudp", word("tcp-udp", "tcp", "udp")),
    ("source", optional(after(word("source"), port_clause))),
    ("destination", optional(after(word("destination"), port_clause))),
)

ICMP_FIELDS = (
    ("icmp", word("icmp6", "icmp")),
    ("type_code", optional(seq(anything(), optional(anything())))),
)

PROTO_FIELDS = (
    ("proto", anything()),
)


def parse_service_object(member: str) -> ServiceObjectRecord:
    """
    Parse one service member, e.g. ``tcp source eq 1024 destination range 80 90``.

    The first matching shape wins: tcp/udp/tcp-udp with optional port
    clauses, then icmp/icmp6 with optional type and code, then a bare
    protocol. An empty member yields an empty record.
    """
    for fields in (TCPUDP_FIELDS, ICMP_FIELDS, PROTO_FIELDS):
        values = match_fields(fields, member)
        if values is not None:
            return ServiceObjectRecord(**values)
    return ServiceObjectRecord()
