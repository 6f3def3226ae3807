import logging
import os

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError
from .keys import Pair

logger = logging.getLogger(__name__)

SECRET_KEY_VAR = "NOSTR_SECRET_KEY"
NSEC_VAR = "NOSTR_NSEC"
MNEMONIC_VAR = "NOSTR_MNEMONIC"


def load_pair_from_env(generate: bool = True, dotenv: bool = True) -> Pair:
    """
    Build the local key pair from the environment (and .env).

    Looks at, in order:
      - NOSTR_SECRET_KEY  (64-hex)
      - NOSTR_NSEC        (nsec1...)
      - NOSTR_MNEMONIC    (BIP-39 phrase, NIP-06 path)

    A variable that is set but malformed raises its parse error. When none
    is set a fresh pair is generated, unless ``generate`` is False.
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    secret_hex = os.getenv(SECRET_KEY_VAR)
    if secret_hex:
        logger.debug("Loading key pair from %s", SECRET_KEY_VAR)
        return Pair.from_hex(secret_hex.strip())

    nsec = os.getenv(NSEC_VAR)
    if nsec:
        logger.debug("Loading key pair from %s", NSEC_VAR)
        return Pair.from_nsec(nsec.strip())

    phrase = os.getenv(MNEMONIC_VAR)
    if phrase:
        logger.debug("Loading key pair from %s", MNEMONIC_VAR)
        return Pair.from_mnemonic(phrase)

    if not generate:
        raise ConfigurationError(f"Missing {SECRET_KEY_VAR}, {NSEC_VAR} or {MNEMONIC_VAR} in environment")

    logger.info("No key material in environment, generating a new key pair")
    return Pair.generate()
