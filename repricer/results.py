from dataclasses import dataclass, field
from decimal import Decimal

CREATED = 'created'
UPDATED = 'updated'
PUSHED = 'pushed'


def _number(value):
    if isinstance(value, Decimal):
        return float(value)
    return value


@dataclass
class ItemResult:
    key: object
    success: bool
    action: str | None = None
    error: str | None = None
    old_price: Decimal | None = None
    new_price: Decimal | None = None

    @classmethod
    def ok(cls, key, action, old_price=None, new_price=None):
        return cls(key=key, success=True, action=action, old_price=old_price, new_price=new_price)

    @classmethod
    def failed(cls, key, error):
        return cls(key=key, success=False, error=str(error))


@dataclass
class SyncSummary:
    results: list[ItemResult] = field(default_factory=list)
    skipped_invalid: int = 0

    def add(self, result):
        self.results.append(result)

    @property
    def created(self):
        return sum(1 for r in self.results if r.success and r.action == CREATED)

    @property
    def updated(self):
        return sum(1 for r in self.results if r.success and r.action == UPDATED)

    @property
    def synced(self):
        return self.created + self.updated

    @property
    def failed(self):
        return sum(1 for r in self.results if not r.success)

    def as_dict(self):
        return {
            'success': True,
            'synced': self.synced,
            'created': self.created,
            'updated': self.updated,
            'failed': self.failed,
            'skipped_invalid': self.skipped_invalid,
        }


@dataclass
class PushSummary:
    results: list[ItemResult] = field(default_factory=list)

    def add(self, result):
        self.results.append(result)

    @property
    def total(self):
        return len(self.results)

    @property
    def succeeded(self):
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self):
        return self.total - self.succeeded

    def as_dict(self):
        items = []
        for r in self.results:
            if r.success:
                items.append({
                    'product_id': r.key,
                    'success': True,
                    'old_price': _number(r.old_price),
                    'new_price': _number(r.new_price),
                })
            else:
                items.append({'product_id': r.key, 'success': False, 'error': r.error})
        return {
            'success': True,
            'results': items,
            'total': self.total,
            'succeeded': self.succeeded,
            'failed': self.failed,
        }
