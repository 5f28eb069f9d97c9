"""Exceptions raised by the fingerprint manager and the account store."""


class DevidError(Exception):
    pass


class AccountNotFound(DevidError, KeyError):
    def __init__(self, email):
        super().__init__(email)
        self.email = email

    def __str__(self):
        return f"No account found for {self.email}"


class OutOfRange(DevidError, IndexError):
    def __init__(self, index, length):
        super().__init__(index, length)
        self.index = index
        self.length = length

    def __str__(self):
        if self.length == 0:
            return f"History index {self.index} out of range (history is empty)"
        return f"History index {self.index} out of range (0-{self.length - 1})"


class AccountStoreError(DevidError):
    pass
