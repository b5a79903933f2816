# Import all schemas
from bookshelf.schemas.book import *
from bookshelf.schemas.migration import *
from bookshelf.schemas.reading_session import *
from bookshelf.schemas.response import *
from bookshelf.schemas.stats import *
from bookshelf.schemas.token import *
from bookshelf.schemas.user import *
from bookshelf.schemas.user_settings import *
