# nrcli

A small command-line tool and library for everyday New Relic chores:

- keeping a persistent CLI configuration (log level, plugin directory,
  usage-data and pre-release switches),
- obfuscating agent configuration values with a key,
- decoding the base64 entity GUIDs and URL state strings used by New Relic One,
- parsing entity tag arguments (library only),
- downloading and running the New Relic Diagnostics (`nrdiag`) binary.

It has no third-party runtime dependencies.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command line

Every command accepts `--format` (`JSON` or `Text`, default `JSON`) and
`--plain` (compact JSON). These affect commands that print a result object,
such as `agent config obfuscate`. Running a command group without a
subcommand prints its help.

Print the version:

```
nrcli version
```

### Configuration

Configuration is stored as JSON in `config.json` under the configuration
directory (`~/.newrelic`). The valid keys are `logLevel`, `pluginDir`,
`sendUsageData` and `preReleaseFeatures`.

```
nrcli config list
nrcli config get --key logLevel
nrcli config set --key logLevel --value DEBUG
nrcli config delete --key logLevel
```

`ls` is an alias of `list`, and `rm` an alias of `delete`. `list` and `get`
print a table of name, value and default.

`logLevel` accepts `Info`, `Debug`, `Trace`, `Warn` or `Error` (any case)
and sets the console log level. `sendUsageData` and `preReleaseFeatures`
accept `ALLOW`, `DISALLOW` or `NOT_ASKED` (any case). Keys must be written
exactly as above. Deleting a key resets it to its default. The environment
variable `NEW_RELIC_CLI_PRERELEASEFEATURES`, when set, overrides the stored
`preReleaseFeatures` value at load time.

### Agent value obfuscation

```
nrcli agent config obfuscate --value <clear-text value> --key placeholder
```

The UTF-8 bytes of the value are XORed with the repeating key and printed as
base64 under `obfuscatedValue`. If either the value or the key is empty the
result is empty.

### Decoding New Relic One strings

Pick one part of an entity GUID (`account`, `product`, `feature` or `ID`);
any other key prints the whole decoded GUID:

```
nrcli decode entity --key account <encoded-guid>
```

Decode a base64 JSON query parameter of a New Relic One URL and pull out one
field. If the field itself holds base64 it is decoded too; otherwise its
plain value is printed:

```
nrcli decode url --param pane --search entityId "<url>"
```

### Diagnostics

The first run downloads the `nrdiag` binary for your system into `bin/nrdiag`
under the configuration directory.

```
nrcli diagnose run
nrcli diagnose run --suites java,infra
nrcli diagnose run --list-suites
nrcli diagnose lint --config-file ./newrelic.yml
nrcli diagnose update
```

`update` asks the installed binary whether it is current and downloads a new
one when it reports that it is not.

## Library use

```python
from nrcli.agent import obfuscate_string_with_key
from nrcli.ternary import Ternary
from nrcli.tags import assemble_tag_value, assemble_tags_input
from nrcli.decode import decode_entity
from nrcli.config import load_config, default_config_directory

obfuscate_string_with_key("XYZ", "123")      # 'aWtp'
Ternary("allow").as_bool()                   # True

assemble_tag_value("env:production")         # ('env', 'production')
assemble_tags_input(["team:a", "team:b"])    # [TagInput(key='team', values=['a', 'b'])]

cfg = load_config(default_config_directory())
cfg.set("pluginDir", "/opt/nr-plugins")
for value in cfg.values():
    print(value.name, value.value, value.is_default())
```

Other library pieces: `nrcli.tags.assemble_tag_values` and `map_entities`,
`nrcli.logsetup.init_logger` and `init_file_logger` (appends plain-text log
lines to `newrelic-cli.log`), and `nrcli.diagnose.run_diagnostics`,
`ensure_binary_exists`, `download_binary`, `extract_binary` and
`update_binary`.

Malformed tags raise `TagFormatError`; invalid configuration keys or values
raise `ConfigError`; undecodable input raises `DecodeError`; diagnostics
problems raise `DiagnoseError` or, when `nrdiag` exits with an error,
`subprocess.CalledProcessError`.

## What it does not do

nrcli does not talk to the New Relic APIs. There are no authentication
profiles or stored API keys, and no commands for entities, tags, APM
applications or deployments, events, API access keys, Edge trace observers,
NerdGraph or installation. The tag helpers only parse arguments; they do not
apply tags. The diagnostics error classes for connection, validation and key
problems exist, but there is no command that checks a configuration against
the platform.