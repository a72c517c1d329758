"""Settings for the multicloud gateway.

Settings are split into components using ``django-split-settings``.
Every module in ``components`` is included in order, so later
components may rely on values defined by earlier ones.
"""

import django_stubs_ext
from split_settings.tools import include

# Allows runtime generics like `admin.ModelAdmin[Token]`
django_stubs_ext.monkeypatch()

include(
    'components/common.py',
    'components/logging.py',
    'components/identity.py',
)
