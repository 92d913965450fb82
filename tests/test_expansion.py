"""
Tests for recursive access-list entry expansion.
"""
import logging

import pytest

from asa_expander.core.exceptions import ExpansionDepthError, ObjectCycleError, UnknownObjectError
from asa_expander.models.catalog import ObjectCatalog, find_reference
from asa_expander.services.expansion_service import AceExpander, build_ace, substitute_reference
from asa_expander.utils.parsers.ace_parser import parse_ace
from asa_expander.utils.parsers.service_parser import parse_service_object


def expand(entries, line, **kwargs):
    return AceExpander(ObjectCatalog.from_dict(entries), **kwargs).expand(line)


def test_line_without_references_is_returned_with_leading_space():
    line = "access-list OUT extended permit tcp any  host 10.0.0.1 eq 80"
    assert expand({}, line) == [" " + line]


def test_service_group_expands_into_port_positions():
    result = expand(
        {"WEBSVC": ["tcp destination eq 80", "tcp destination eq 443"]},
        "access-list OUT extended permit object-group WEBSVC any any",
    )

    assert result == [
        " access-list OUT extended permit tcp any any eq 80",
        " access-list OUT extended permit tcp any any eq 443",
    ]


def test_tcp_udp_member_yields_tcp_then_udp():
    result = expand(
        {"SRV": ["tcp-udp destination eq 53"]},
        "access-list A extended permit object SRV any any",
    )

    assert result == [
        " access-list A extended permit tcp any any eq 53",
        " access-list A extended permit udp any any eq 53",
    ]


def test_tcp_branch_is_fully_expanded_before_udp():
    result = expand(
        {
            "SRV": ["tcp-udp destination eq 53"],
            "DNS": ["host 10.0.0.53", "host 10.0.1.53"],
        },
        "access-list A extended permit object-group SRV any object-group DNS",
    )

    assert result == [
        " access-list A extended permit tcp any host 10.0.0.53 eq 53",
        " access-list A extended permit tcp any host 10.0.1.53 eq 53",
        " access-list A extended permit udp any host 10.0.0.53 eq 53",
        " access-list A extended permit udp any host 10.0.1.53 eq 53",
    ]


def test_nested_groups_resolve_recursively():
    result = expand(
        {"G1": ["object-group G2"], "G2": ["10.0.0.0 255.0.0.0"]},
        "access-list A extended permit ip object-group G1 any",
    )

    assert result == [" access-list A extended permit ip 10.0.0.0 255.0.0.0 any"]


def test_fan_out_matches_member_count():
    members = [f"host 10.0.0.{i}" for i in range(1, 8)]
    result = expand({"HOSTS": members}, "access-list A extended deny ip object-group HOSTS any log")

    assert len(result) == 7
    assert result[0] == " access-list A extended deny ip host 10.0.0.1 any log"
    assert result[-1] == " access-list A extended deny ip host 10.0.0.7 any log"


def test_same_group_twice_is_not_a_cycle():
    result = expand(
        {"NETS": ["10.0.0.0 255.0.0.0", "host 1.1.1.1"]},
        "access-list A extended permit ip object-group NETS object-group NETS",
    )

    assert result == [
        " access-list A extended permit ip 10.0.0.0 255.0.0.0 10.0.0.0 255.0.0.0",
        " access-list A extended permit ip 10.0.0.0 255.0.0.0 host 1.1.1.1",
        " access-list A extended permit ip host 1.1.1.1 10.0.0.0 255.0.0.0",
        " access-list A extended permit ip host 1.1.1.1 host 1.1.1.1",
    ]


def test_source_and_destination_ports_are_positioned():
    result = expand(
        {"S": ["tcp source eq 1024 destination range 80 81"]},
        "access-list X extended permit object-group S host 10.0.0.1 10.2.0.0 255.255.0.0",
    )

    assert result == [
        " access-list X extended permit tcp host 10.0.0.1 eq 1024 10.2.0.0 255.255.0.0 range 80 81"
    ]


def test_icmp_members_keep_trailing_options():
    result = expand(
        {"PING": ["icmp echo", "icmp6"]},
        "access-list X extended permit object-group PING any any log",
    )

    assert result == [
        " access-list X extended permit icmp any any echo log",
        " access-list X extended permit icmp6 any any log",
    ]


def test_user_and_security_fields_survive_structural_rebuild():
    result = expand(
        {"S": ["tcp destination eq 22"]},
        "access-list X extended permit object-group S user LOCAL\\bob "
        "security-group name HR any security-group tag 10 any",
    )

    assert result == [
        " access-list X extended permit tcp user LOCAL\\bob security-group name HR any "
        "security-group tag 10 any eq 22"
    ]


def test_port_and_protocol_groups_take_textual_path():
    result = expand(
        {"PROTOS": ["tcp", "udp"], "PORTS": ["eq 80", "range 8000 8080"]},
        "access-list X extended permit object-group PROTOS any any",
    )
    assert result == [
        " access-list X extended permit tcp any any",
        " access-list X extended permit udp any any",
    ]

    result = expand(
        {"PORTS": ["eq 80", "range 8000 8080"]},
        "access-list X extended permit tcp any any object-group PORTS",
    )
    assert result == [
        " access-list X extended permit tcp any any eq 80",
        " access-list X extended permit tcp any any range 8000 8080",
    ]


def test_textual_substitution_produces_single_spaced_fields():
    result = expand(
        {"N": ["10.0.0.0 255.0.0.0"]},
        "access-list OUT extended permit ip object-group N any",
    )
    assert result == [" access-list OUT extended permit ip 10.0.0.0 255.0.0.0 any"]
    assert "  " not in result[0]


def test_resolved_reference_is_eliminated_from_candidate():
    line = "access-list A extended permit ip object-group N any"
    reference = find_reference(line)
    candidate = substitute_reference(line, reference, "host 10.0.0.1")

    assert candidate == "access-list A extended permit ip host 10.0.0.1 any"
    assert "object-group N" not in candidate


def test_unparseable_entry_is_tolerated_on_structural_path(caplog):
    with caplog.at_level(logging.WARNING):
        result = expand(
            {"S": ["tcp destination eq 80"]},
            "access-list X extended permit object-group S host 2001:db8::1 any",
        )

    assert result == [" access-list extended tcp eq 80"]
    assert "Could not parse ACE" in caplog.text


def test_unknown_reference_fails_loudly():
    with pytest.raises(UnknownObjectError) as exc_info:
        expand({}, "access-list A extended permit ip object-group MISSING any")
    assert exc_info.value.name == "MISSING"


def test_cyclic_groups_raise():
    with pytest.raises(ObjectCycleError):
        expand(
            {"A": ["object-group B"], "B": ["object-group A"]},
            "access-list X extended permit ip object-group A any",
        )


def test_depth_limit():
    entries = {
        "G1": ["object-group G2"],
        "G2": ["object-group G3"],
        "G3": ["host 10.0.0.1"],
    }
    line = "access-list X extended permit ip object-group G1 any"

    with pytest.raises(ExpansionDepthError):
        expand(entries, line, max_depth=1)
    assert expand(entries, line, max_depth=3) == [
        " access-list X extended permit ip host 10.0.0.1 any"
    ]


def test_build_ace_skips_empty_fields():
    entry = parse_ace("access-list X extended permit object-group S any any")
    service = parse_service_object("udp destination eq 161")

    assert build_ace(entry, service) == "access-list X extended permit udp any any eq 161"
    assert build_ace(entry, service, "tcp") == "access-list X extended permit tcp any any eq 161"
