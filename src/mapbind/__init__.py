# pyright: reportUnusedImport=false
from mapbind.adapter import MapAdapter, MutableMapAdapter, ReinsertingMapAdapter, ReplacingMapAdapter
from mapbind.binder import bind_map
from mapbind.config import (
    bind_from_config,
    bind_from_file,
    describe_bindings,
    load_bindings_file,
    save_bindings_file,
)
from mapbind.containers import Container, Cursor, HashContainer, SortedContainer
from mapbind.errors import BindingConfigError, BindingError, KeyNotFoundError
from mapbind.iterator import (
    EntryIterator,
    IteratorState,
    Projection,
    make_item_iterator,
    make_iterator,
    make_key_iterator,
    make_value_iterator,
)
from mapbind.policy import MutationPolicy, not_assignable, not_copyable, select_policy
from mapbind.registry import BoundMap, all_registered, lookup
from mapbind.views import ItemView, KeyView, MapView, ValueView
