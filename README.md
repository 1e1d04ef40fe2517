# aibird

The core pieces of an IRC bot that passes chat commands on to AI services.
It tracks users, channels and networks. It parses and validates commands,
builds help text from built-in commands and from workflow files, and uploads
generated files to a file host.

## Modules

- `aibird.users`: `User` and `UserModes`. A user has a nick, ident, host,
  activity times, access level, admin, owner and ignore flags, and AI
  settings. Modes are kept per channel as preserved modes and current modes.
  `User.to_dict` and `User.from_dict` convert users to and from plain data.
- `aibird.channels`: `Channel`. It handles user lookup, where the most
  recently active match wins. It also syncs and forgets modes and checks
  whether a user can op.
- `aibird.networks`: `Network`, `Server` and `Admin`. A network looks up
  channels and users, checks admin and owner hosts, and picks a server at
  random. It stores its user list in a `BirdBase`. `save()` writes after a
  short delay, so several calls close together lead to one write.
  `save_now()` writes at once and `load()` reads the list back.
- `aibird.birdbase`: `BirdBase`, a key-value store in a SQLite file. Keys are
  hashed with SHA3-224 and values are gzip-compressed. An entry can expire
  after a number of seconds or hours. `get` raises `KeyError` when a key is
  missing or has expired. `merge()` drops expired entries and reclaims space.
  A `BirdBase` can be used as a context manager.
- `aibird.arguments`: `parse_command` splits text such as
  `!sd a castle --steps=30 --style="oil painting" --pe` into a
  `ParsedCommand`, which holds the action, the message and the arguments. It
  raises `ValueError` when the text does not start with the trigger.
  `ParsedCommand` has `find`, `get_string`, `get_int`, `get_bool` and
  `is_empty_message`. `chunk_message` turns a reply into lines of IRC size.
  `should_trim_output` decides whether a reply should only be excerpted.
- `aibird.helpers`: converts `{b}`/`{red}` codes and Markdown to IRC
  formatting. It also wraps text, formats durations, maps mode letters to
  prefixes (`o` to `@`, `v` to `+`, ...) and back, and has `get_ip()`.
- `aibird.prompts`: `clean_prompt` rewrites or rejects image prompts.
  `bad_words_check` checks a message against a word list.
- `aibird.workflows`: lists the workflow JSON files in a directory
  (`comfyuijson` by default). `get_aibird_meta` reads the TOML held in a
  workflow's `aibird_meta` node and returns an `AibirdMeta`, which holds the
  parameters, defaults, ranges and target widgets.
- `aibird.help`: `Help` entries for the standard, text, admin and owner
  commands, and for the image, video and sound workflows.
  - `format_help` renders entries as a tree.
  - `find_help` returns the formatted help for one command.
  - Pass a list of voices to the help functions to list them under a `voice`
    parameter. Without one, the help says the voices load dynamically.
- `aibird.commands`: the command catalogue.
  - `all_commands` and `is_valid_command_for_channel` take into account the
    features a channel has enabled and the user's rights.
  - `is_queueable` says whether a command goes through the queue.
  - `categorize` returns a `CommandCategory`: text, image, video or sound.
- `aibird.request`: `Request`, which sends a JSON POST, a multipart file
  upload with form fields, or a plain call. It also has `download()`.
  `file_content_type` guesses a file's type, and `is_image` checks a URL for
  an image of at most 5 MB. Failures raise `RequestError`.
- `aibird.imaging`: `to_jpeg` re-encodes PNG bytes as JPEG.
  `convert_png_to_jpg` replaces a `.png` file with a `.jpg` one.
  `extract_urls` finds URLs in text, and `is_image_url` checks one with a
  HEAD request.
- `aibird.birdhole`: `upload` sends a file with a description and extra
  fields to the host set in a `BirdholeConfig`, and returns the URL it was
  given.
- `aibird.logger`: logging as text or JSON. `configure` takes a `LogConfig`.
  `debug`, `info`, `warn` and `error` take keyword fields, and `bind` returns
  a logger that adds context to each record.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from aibird.arguments import parse_command
from aibird.commands import is_valid_command_for_channel
from aibird.help import find_help

cmd = parse_command("!ai tell me a joke --tts", "!")
print(cmd.action, cmd.message, cmd.get_bool("tts"))  # ai tell me a joke True

ok = is_valid_command_for_channel(
    cmd.action, True, False, False, False, False, False, "comfyuijson", []
)
print(ok)  # True: "ai" is a text command and AI is enabled
print(find_help("seen", "comfyuijson", []))
```

```python
from aibird.birdbase import BirdBase

with BirdBase("bird.db") as db:
    db.put_string_expire_seconds("flood:net:nick", "1", 1)
    print(db.has("flood:net:nick"))
```

## What it does not do

This package is a library with no command to run. It does not include:

- a connection to an IRC server, or the event handlers that respond to joins,
  mode changes and messages;
- the GPU job queue;
- a client that submits workflows to ComfyUI;
- calls to text-generation services.

`categorize` and `is_queueable` decide where a command would go, but nothing
in the package runs it.