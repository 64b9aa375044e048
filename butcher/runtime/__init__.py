
from butcher.runtime.cow import Cow, Owned, Borrowed, Scope, STATIC, borrow
from butcher.runtime.ownership import Box, clone, to_owned, deref, into_target, register_to_owned, register_deref
from butcher.runtime.core import Butcher, View, Sum, is_butcherable, variant_of
from butcher.runtime.iterator import CowIter, cow_iter
from butcher.runtime.unnest import unnest
from butcher.runtime.as_deref import as_deref
from butcher.runtime import methods
