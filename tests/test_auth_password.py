from storefront.auth import hash_password, verify_password


def test_password_hash_round_trip():
    hashed = hash_password("secret")
    assert hashed.startswith("$pbkdf2-sha256$")
    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)


def test_oauth_only_users_cannot_password_login():
    # users created through a provider have no password hash
    assert not verify_password("anything", None)
    assert not verify_password("anything", "")
