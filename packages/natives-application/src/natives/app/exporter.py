import json
from typing import Union

from natives.spec import DeliveryMode

_DLOPEN_TEMPLATE = """
function get() {
  let p = require('path').resolve(__dirname, %(name)s);
  if (!require.cache[p]) {
    let module = {exports:{}};
    process.dlopen(module, p);
    require.cache[p] = module;
  }
  // Kept indirect so bundler plugins and minifiers leave this require alone.
  let req = require || require;
  return req(p);
};
export default get();
"""

_ESM_TEMPLATE = """import { createRequire } from 'module';
const require = createRequire(import.meta.url);
export default require(%(name)s);
"""


def export_stub(output_name: str, mode: Union[DeliveryMode, str] = DeliveryMode.PLAIN) -> str:
    """Generates the module code served for a virtual identity."""
    mode = DeliveryMode(mode)
    name = json.dumps(output_name)

    if mode is DeliveryMode.DLOPEN:
        return _DLOPEN_TEMPLATE % {"name": name}
    if mode is DeliveryMode.ESM:
        return _ESM_TEMPLATE % {"name": name}
    return f"export default require({name});\n"
