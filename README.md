# cubekit

Building blocks for block-game servers, written in plain Python with no
third-party dependencies:

- **NBT** (Named Binary Tag): typed values, homogeneous lists, compounds, and
  an encoder and decoder for the uncompressed binary format. Strings use
  Java's modified UTF-8 (CESU-8), and nesting of lists and compounds is
  limited to 512 levels.
- **Text components**: formatted chat text with colours, styles, click and
  hover events, converted to and from the JSON text format.
- **Utilities**: username validation, view-distance chunk iteration,
  yaw/pitch conversion and ray/box intersection.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## NBT

The modules are `cubekit.nbt_tag` (`Tag`), `cubekit.nbt_value` (`Value`,
`NbtList`, `Compound`, `to_value`), `cubekit.nbt_encode` and
`cubekit.nbt_decode`.

```python
from cubekit.nbt_tag import Tag
from cubekit.nbt_value import Compound, NbtList, Value
from cubekit.nbt_encode import to_binary
from cubekit.nbt_decode import from_binary

c = Compound()
c["byte"] = Value.byte(5)
c["string"] = Value.string("hello")
c["ints"] = Value.int_array([1, -2, 3])
c["floats"] = NbtList(Tag.FLOAT, [1.5, 2.5])

data = to_binary(c, "")
decoded, root_name = from_binary(data)
assert decoded == c
assert root_name == ""
```

- `Value` pairs a `Tag` with a payload. The constructors (`Value.byte`,
  `Value.short`, `Value.int`, `Value.long`, `Value.float`, `Value.double`,
  `Value.byte_array`, `Value.string`, `Value.list`, `Value.compound`,
  `Value.int_array`, `Value.long_array`, `Value.from_bool`) check ranges and
  types; `Value.float` rounds to single precision.
- `NbtList(element, items)` holds items that all have the element type.
- `Compound` is a mutable mapping from `str` keys to `Value`s and iterates
  in sorted key order. Assigning a plain Python object converts it with
  `to_value`: `bool` becomes a byte, integers an int (or a long when they do
  not fit 32 bits), floats a double, `str` a string, `bytes` a byte array,
  `NbtList` a list and mappings a compound. `insert`, `remove`, `append` and
  `retain` are also available.
- `to_binary(compound, root_name="")` returns bytes;
  `write_binary(stream, compound, root_name="")` writes them to a binary file
  object.
- `from_binary(data)` returns `(compound, root_name)` and ignores bytes after
  the root compound. `read_binary(stream)` reads the rest of the stream and,
  if the stream is seekable, leaves it just after the root compound.
- `encode_cesu8` and `decode_cesu8` convert strings to and from CESU-8.

Malformed input, values that cannot be encoded and too deep nesting raise
`cubekit.nbt_errors.NbtError` (a `ValueError`). `str(tag)` gives a tag's
readable name, such as `"byte array"`.

## Text

```python
from cubekit.text import Color, Text, into_text

txt = (
    into_text("The text is ")
    + into_text("Red").color(Color.RED)
    + ", and "
    + into_text("Italic").italic()
    + "."
)
assert txt.to_plain() == "The text is Red, and Italic."

json_text = txt.to_json()
assert Text.from_json(json_text) == txt
```

`Text` is immutable: every formatting method (`color`, `font`, `bold`,
`not_bold`, `clear_bold`, the same for `italic`, `underlined`,
`strikethrough` and `obfuscated`, `insertion`, `on_click_open_url`,
`on_click_run_command`, `on_click_suggest_command`, `on_click_change_page`,
`on_click_copy_to_clipboard`, `on_hover_show_text`, `add_child` and their
`clear_*` counterparts) returns a new text. `+` appends a child. `Text.plain`
and `Text.translate` build plain and translated content; `to_dict`,
`from_dict`, `to_json` and `from_json` convert to and from the JSON form.

Colours accept `#rrggbb` hex strings in any case or the sixteen named
colours (`Color.from_str("gold")`); `color_from_str` returns `None` instead
of raising. `to_hex` writes lower-case `#rrggbb`.

## Utilities

```python
from cubekit.util import ChunkPos, valid_username, chunks_in_view_distance

assert valid_username("jeb_")
assert not valid_username("NotValid!")

visible = list(chunks_in_view_distance(ChunkPos(0, 0), 2))
```

`is_chunk_in_view_distance`, `to_yaw_and_pitch`, `from_yaw_and_pitch`,
`aabb_from_bottom_and_size`, `ray_box_intersect` (with `Aabb`) and
`log2_ceil` cover view checks, look directions and hit tests.

## What this package does not do

- It is not a server: there is no networking, packet protocol, world or
  chunk storage, or client handling.
- NBT is handled only in its uncompressed form; decompress gzip or zlib data
  first (for example with the standard `gzip` module).
- The JSON text reader understands `text` and `translate` content only;
  score, selector, keybind and NBT components, and translation arguments,
  are not supported.