"""
Pytest configuration and fixtures for wg-show tests.
"""

import pytest


SAMPLE_CONFIG = """\
[Interface]
# Address = 10.0.0.1/24
Address = 10.0.0.1/24
ListenPort = 51820
PrivateKey = cHJpdmF0ZQ==

# Office

## Alice laptop (@bob)
[Peer]
PublicKey = AAAA
AllowedIPs = 10.0.0.2/32

## Carol phone
[Peer]
PublicKey = CCCC
AllowedIPs = 10.0.0.3/32

# Dave desktop (@erin)
[Peer]
PublicKey = DDDD
AllowedIPs = 10.0.0.4/32

# PersistentKeepalive = 25
[Peer]
PublicKey = EEEE
AllowedIPs = 10.0.0.5/32
"""


SAMPLE_STATUS = """\
interface: wg0
  public key: SERVERKEY
  private key: (hidden)
  listening port: 51820

peer: AAAA
  endpoint: 203.0.113.5:51820
  allowed ips: 10.0.0.2/32
  latest handshake: 1 minute, 5 seconds ago
  transfer: 1.2 MiB received, 3.4 MiB sent

peer: CCCC
  preshared key: (hidden)
  endpoint: 198.51.100.7:40000
  allowed ips: 10.0.0.3/32
  latest handshake: 2 hours, 1 minute ago
  transfer: 10 KiB received, 20 KiB sent
  persistent keepalive: every 25 seconds

peer: DDDD
  allowed ips: 10.0.0.4/32

peer: EEEE
  endpoint: 192.0.2.9:51820
  allowed ips: 10.0.0.5/32
  latest handshake: 5 seconds ago
  transfer: 100 B received, 200 B sent
"""


@pytest.fixture
def config_lines():
    """Annotated wg0.conf split into lines."""
    return SAMPLE_CONFIG.splitlines()


@pytest.fixture
def status_output():
    """Output of `wg show wg0` for the sample config."""
    return SAMPLE_STATUS


@pytest.fixture
def config_dir(tmp_path):
    """Directory holding the sample wg0.conf."""
    (tmp_path / "wg0.conf").write_text(SAMPLE_CONFIG, encoding="utf-8")
    return tmp_path
