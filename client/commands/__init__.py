from .create import cmd_create
from .post import cmd_post, build_signed_message
from .list import cmd_list, format_message
from .keys import cmd_export_key, cmd_trust
