AES_KEY_B64 = "fn+Qnu0P5I6alrqUYAU2ToZQt5MAjl+RSA0nOPtR9R8="
AES_IV_B64 = "kBNmAwfcb3L2W/IvcBbjbA=="
HELLO_CIPHERTEXT_B64 = "SjBvLNOlEPxpZSu0PIzjPg=="
