import pytest

from hybrid_keys.crypto.asymmetric import KeyPair, generate_key_pair


# RSA-4096 generation takes seconds, so pairs are shared across the session.
@pytest.fixture(scope="session")
def key_pair() -> KeyPair:
    return generate_key_pair()


@pytest.fixture(scope="session")
def other_key_pair() -> KeyPair:
    return generate_key_pair()
