"""Deterministic (CREATE2) deployment addresses."""

from dataclasses import dataclass

from eth_utils import decode_hex, keccak, to_checksum_address

from routergen.errors import ConfigurationError

# Deterministic deployment proxy used by Foundry's `forge create2` tooling
DEFAULT_DEPLOYER = "0x4e59b44847b379578588920ca78fbf26c0b4956c"
DEFAULT_SALT = "0x" + "00" * 32


@dataclass(frozen=True)
class DeploymentTarget:
    """Deployer address (20 bytes) and salt (32 bytes) used to predict module addresses."""

    deployer: bytes
    salt: bytes

    @classmethod
    def from_hex(cls, deployer: str, salt: str) -> "DeploymentTarget":
        """
        Build a target from hex strings.

        Raises:
            ConfigurationError: If either value is not valid hex of the right length
        """
        deployer_bytes = _decode(deployer, 20, "deployer")
        salt_bytes = _decode(salt, 32, "salt")
        return cls(deployer=deployer_bytes, salt=salt_bytes)

    def address_for(self, bytecode: bytes) -> str:
        return compute_create2_address(self.deployer, self.salt, bytecode)


def _decode(value: str, size: int, label: str) -> bytes:
    try:
        raw = decode_hex(value)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid {label} '{value}': {e}")
    if len(raw) != size:
        raise ConfigurationError(
            f"Invalid {label} '{value}': expected {size} bytes, got {len(raw)}"
        )
    return raw


def compute_create2_address(deployer: bytes, salt: bytes, bytecode: bytes) -> str:
    """
    Predict the address of a contract deployed with CREATE2 (EIP-1014).

    ``keccak256(0xff ++ deployer ++ salt ++ keccak256(bytecode))[12:]``

    Returns:
        EIP-55 checksummed address
    """
    digest = keccak(b"\xff" + deployer + salt + keccak(bytecode))
    return to_checksum_address(digest[12:])
