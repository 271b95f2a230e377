"""Tests for the command line interface."""

from ledgerflow.cli.commands.accounts import DEFAULT_CHART_OF_ACCOUNTS
from ledgerflow.cli.main import cli


def invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_accounts_init_and_list(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "accounts", "init")

    assert result.exit_code == 0
    assert f"Successfully created {len(DEFAULT_CHART_OF_ACCOUNTS)} accounts" in result.output

    names = {acc.name for acc in temp_db.list_accounts()}
    assert "Owner's Draw" in names
    assert "Owner's Contribution" in names

    listed = invoke(cli_runner, temp_db, "accounts", "list")
    assert listed.exit_code == 0
    assert "Owner's Draw" in listed.output


def test_accounts_init_twice_requires_force(cli_runner, temp_db):
    invoke(cli_runner, temp_db, "accounts", "init")

    result = invoke(cli_runner, temp_db, "accounts", "init")
    assert "Use --force" in result.output

    forced = invoke(cli_runner, temp_db, "accounts", "init", "--force")
    assert forced.exit_code == 0
    assert "Successfully created 0 accounts" in forced.output


def test_accounts_add_duplicate(cli_runner, temp_db):
    first = invoke(cli_runner, temp_db, "accounts", "add", "Checking", "--type", "Asset")
    assert first.exit_code == 0
    assert "Created account 'Checking'" in first.output

    second = invoke(cli_runner, temp_db, "accounts", "add", "Checking", "--type", "Asset")
    assert second.exit_code == 1
    assert "already exists" in second.output.lower()


def test_accounts_list_empty(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "accounts", "list")

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_import_review_post_flow(cli_runner, temp_db, chart, tmp_path, wells_fargo_csv):
    csv_path = tmp_path / "checking.csv"
    csv_path.write_bytes(wells_fargo_csv)

    imported = invoke(
        cli_runner,
        temp_db,
        "import",
        str(csv_path),
        "--source-type",
        "Bank",
        "--source-account",
        "Business Checking",
    )
    assert imported.exit_code == 0, imported.output
    assert "Format: wells-fargo" in imported.output
    assert "Imported: 2 transactions" in imported.output

    # No AI service is configured, so every row is Uncategorized
    transactions = temp_db.list_bank_transactions(status="Pending")
    assert len(transactions) == 2
    assert all(txn.suggested_category == "Uncategorized" for txn in transactions)

    listed = invoke(cli_runner, temp_db, "review", "list", "--status", "Pending")
    assert "STAPLES STORE 123" in listed.output

    expense = next(txn for txn in transactions if txn.amount < 0)
    approved = invoke(
        cli_runner, temp_db, "review", "approve", expense.id, "--account", "Office Supplies"
    )
    assert approved.exit_code == 0, approved.output

    income = next(txn for txn in transactions if txn.amount > 0)
    invoke(cli_runner, temp_db, "review", "reject", income.id)

    posted = invoke(cli_runner, temp_db, "post", expense.id, income.id)
    assert posted.exit_code == 0, posted.output
    assert "Posted 1 of 2 transactions" in posted.output
    assert temp_db.get_bank_transaction(expense.id).status == "Posted"
    assert temp_db.get_bank_transaction(income.id).status == "Rejected"


def test_import_unknown_source_account(cli_runner, temp_db, chart, tmp_path, wells_fargo_csv):
    csv_path = tmp_path / "checking.csv"
    csv_path.write_bytes(wells_fargo_csv)

    result = invoke(cli_runner, temp_db, "import", str(csv_path), "--source-account", "Savings")

    assert result.exit_code == 1
    assert "Error: Account 'Savings' not found" in result.output


def test_import_unknown_format(cli_runner, temp_db, chart, tmp_path):
    csv_path = tmp_path / "other.csv"
    csv_path.write_text("Date,Payee,Outflow\n2024-01-01,Shop,10\n")

    result = invoke(cli_runner, temp_db, "import", str(csv_path))

    assert result.exit_code == 1
    assert "Unsupported CSV format" in result.output


def test_import_prints_next_offset(cli_runner, temp_db, chart, tmp_path, monkeypatch):
    monkeypatch.setenv("IMPORT_BATCH_SIZE", "2")
    csv_path = tmp_path / "big.csv"
    csv_path.write_text(
        "".join(f'"01/{day:02d}/2024","-{day}.00","*","","VENDOR {day}"\n' for day in range(1, 6))
    )

    result = invoke(cli_runner, temp_db, "import", str(csv_path))

    assert result.exit_code == 0, result.output
    assert "Imported: 2 transactions" in result.output
    assert "3 rows remaining. Continue with --offset 2" in result.output


def test_post_rule_violation_exits_with_error(cli_runner, temp_db, make_transaction, review_service):
    txn = make_transaction(suggested_account_id=None)
    review_service.approve(txn.id)

    result = invoke(cli_runner, temp_db, "post", txn.id)

    assert result.exit_code == 1
    assert "Missing account information" in result.output


def test_approve_high_confidence(cli_runner, temp_db, make_transaction):
    make_transaction(confidence_score=95)
    make_transaction(confidence_score=10)

    result = invoke(cli_runner, temp_db, "review", "approve-high-confidence")

    assert result.exit_code == 0
    assert "Approved 1 transactions with confidence >= 80%" in result.output


def test_reset_db(cli_runner, temp_db, make_transaction, chart):
    make_transaction()

    result = invoke(cli_runner, temp_db, "reset-db", "--yes")

    assert result.exit_code == 0
    assert "Database reset successfully" in result.output
    assert temp_db.list_bank_transactions() == []
    assert len(temp_db.list_accounts()) == len(chart)


def test_reset_db_requires_confirmation(cli_runner, temp_db, make_transaction):
    make_transaction()

    result = invoke(cli_runner, temp_db, "reset-db", input="n\n")

    assert result.exit_code == 1
    assert len(temp_db.list_bank_transactions()) == 1
