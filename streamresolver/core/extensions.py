from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Rate limit by client IP; resolving fans out to several upstream calls
limiter = Limiter(key_func=get_remote_address)
