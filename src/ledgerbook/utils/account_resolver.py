"""Utility for resolving account names to IDs."""

from ledgerbook.domain.errors import NotFoundError, ValidationError, account_not_found


def resolve_account(account_service, account: str) -> str:
    """Resolve an account ID, an ID prefix or an account name to an account ID.

    Args:
        account_service: AccountService instance
        account: Account ID, unique ID prefix, or account name
            (matched case and accent insensitively)

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account matches
        ValidationError: If the value matches more than one account
    """
    if account_service.get_account(account) is not None:
        return account

    from ledgerbook.utils.search import normalize_for_search

    accounts = account_service.list_accounts()

    # IDs are UUIDs, so allow the short prefix shown in listings
    by_prefix = [acc for acc in accounts if len(account) >= 6 and acc.id.startswith(account)]
    if len(by_prefix) == 1:
        return by_prefix[0].id

    wanted = normalize_for_search(account)
    by_name = [acc for acc in accounts if normalize_for_search(acc.name) == wanted]
    if len(by_name) == 1:
        return by_name[0].id
    if len(by_name) > 1:
        raise ValidationError(
            f"Account name '{account}' is ambiguous ({len(by_name)} accounts); use the account ID"
        )

    raise NotFoundError(account_not_found(account))
