"""
Accounts App - Customer accounts

Users own payments. The payments app only needs an existence check by id,
exposed through ``apps.accounts.services.get_user_or_raise``.
"""
