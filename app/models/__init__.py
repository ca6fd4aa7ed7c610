# Accounts
from app.models.users.account_models import Account

# Ledger
from app.models.ledger.activity_record_models import ActivityRecord, ActivityEntry
