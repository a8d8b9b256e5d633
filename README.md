# aesvault

Password-based encryption of files and folders with AES.

The steps for encryption are:

1. The file or folder is packed into a 7z archive beside it. This uses the external `7z` program, which must be on your `PATH`.
2. The archive is encrypted with AES in ECB, CBC, CFB or OFB mode. The key is the SHA-256 hash of the password, encoded as UTF-8.
3. The result is written as a container that carries an HMAC-SHA256 tag.

Decryption checks the tag first, which catches a wrong password or a damaged file. It then decrypts the archive and extracts it with `7z`.

AES, SHA-256 and HMAC are implemented in pure Python, with no dependencies. Files larger than 1 GiB are refused.

**Note:** after a successful run, the input is deleted:

- When you encrypt, the original file or folder is removed, unless it is the output path itself.
- When you decrypt, the `.aes` file is removed.
- The intermediate `.7z` archive is always removed.

## Installation

```
pip install .
```

## Command line

### aesvault-encrypt

```
aesvault-encrypt path/to/folder
```

Asks once for a key, then encrypts in CBC mode. The output is written next to the input:

- For a folder: `<folder name>.aes`
- For a file: `<file stem>.aes`

Progress and a table of timings are printed.

### aesvault-decrypt

```
aesvault-decrypt path/to/folder.aes
```

Asks for the key, then extracts the contents into the directory that holds the `.aes` file.

### aesvault

```
aesvault path/to/report.pdf
aesvault path/to/report.aes
aesvault path/to/folder -m OFB -o backup.aes
```

The path decides what happens:

- A path ending in `.aes` (in any case) is decrypted.
- Any other path is encrypted.

Surrounding double quotes on the path are removed.

The options are:

- `-o/--output`: the output file when encrypting, or the output directory when decrypting.
- `-m/--mode`: the cipher mode when encrypting. One of `ECB`, `CBC`, `CFB` or `OFB`; the default is `CBC`.

If you do not give `-o`, these defaults are used:

- A folder encrypts to `<folder>.aes`.
- A file encrypts to `<name before the first dot>.aes` beside it.
- An `.aes` file decrypts into its own directory.

When encrypting, the password is asked for twice. The two entries must match, and the password must be at least 4 characters long. When the run finishes, a summary of timings and throughput is printed.

All commands exit with status 1 on error and 0 on success.

## Container format

```
"AES" | key length (1 byte) | mode (1 byte) | IV (16 bytes, not for ECB) | ciphertext | HMAC-SHA256 (32 bytes)
```

| Code | Mode |
|------|------|
| 0    | ECB  |
| 1    | CBC  |
| 2    | CFB  |
| 3    | OFB  |

Padding and lengths depend on the mode:

- ECB and CBC use PKCS#7 padding.
- CFB and OFB keep the plaintext length.

The HMAC is computed with the key over everything that comes before it.

## Library use

```python
from aesvault.aes import AES, Mode
from aesvault.sha256 import sha256
from aesvault.fileformat import build_encrypted_format, parse_encrypted_format

password = "password"
key = sha256(password.encode("utf-8"))
cipher = AES(key, Mode.CBC)
iv = cipher.generate_random_iv()
blob = build_encrypted_format(cipher.encrypt(b"hello", iv), key, iv, Mode.CBC)

result = parse_encrypted_format(blob, key)
assert AES(result.key, result.mode).decrypt(result.ciphertext, result.iv) == b"hello"
```

Modules:

- `aesvault.aes`: `AES`, `Mode`, `pad` and `unpad`.
- `aesvault.blockcipher`: the single-block transform, `BlockCipher` and `expand_key`.
- `aesvault.sha256`: `sha256`.
- `aesvault.mac`: `hmac_sha256`.
- `aesvault.fileformat`: `build_encrypted_format`, and `parse_encrypted_format`, which raises `FormatError`.
- `aesvault.fileio`: `read_file_bytes` and `write_file_bytes`.
- `aesvault.compressor`: `Compressor`, `decompress` and `check_format_7z`. These raise `CompressionError`.

For whole jobs, use `aesvault.pipeline`:

- `encrypt_path(input_path, output_path, password, mode, progress)`
- `decrypt_path(input_path, output_path, password, progress)`

Both take an optional `progress(percentage, status)` callback. They return a `ProcessMetrics` record of timings and throughput, and raise `ProcessError` on failure.

## What it does not do

There is no graphical interface; aesvault works only from the command line and as a library.

It cannot archive or extract by itself. Without the `7z` program, encrypting a path and decrypting a container both fail. The cipher, format and hash functions still work without it.