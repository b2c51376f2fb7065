import os


BASE_TIME = 1600000000


def write_file(filepath, content, mtime=None):
    os.makedirs(os.path.dirname(filepath), exist_ok=True)
    with open(filepath, "w") as f:
        f.write(content)
    if mtime is not None:
        os.utime(filepath, (mtime, mtime))
    return filepath


def read_file(filepath):
    with open(filepath, "r") as f:
        return f.read()


def folder_contents(folder):
    contents = set()
    for name in os.listdir(folder):
        contents.add(read_file(os.path.join(folder, name)))
    return contents


def snapshot(folder):
    tree = {}
    for root, dirs, files in os.walk(folder):
        for name in files:
            filepath = os.path.join(root, name)
            with open(filepath, "rb") as f:
                tree[os.path.relpath(filepath, folder)] = f.read()
    return tree


def stage_msp(msp_dir, identity):
    write_file(os.path.join(msp_dir, "cacerts", "rca.pem"), f"{identity}-rca", BASE_TIME)
    write_file(
        os.path.join(msp_dir, "intermediatecerts", "ica.pem"), f"{identity}-ica", BASE_TIME
    )
    write_file(os.path.join(msp_dir, "signcerts", "cert.pem"), f"{identity}-sign", BASE_TIME)
    write_file(os.path.join(msp_dir, "keystore", "key_sk"), f"{identity}-key", BASE_TIME)


def stage_tls(tls_dir, identity):
    write_file(os.path.join(tls_dir, "tlscacerts", "tls-rca.pem"), f"{identity}-tls-rca", BASE_TIME)
    write_file(
        os.path.join(tls_dir, "tlsintermediatecerts", "tls-ica.pem"),
        f"{identity}-tls-ica",
        BASE_TIME,
    )
    write_file(os.path.join(tls_dir, "signcerts", "cert.pem"), f"{identity}-tls-sign", BASE_TIME)
    write_file(os.path.join(tls_dir, "keystore", "key_sk"), f"{identity}-tls-key", BASE_TIME)


def stage_identity(root, identity, org_name, tls=True):
    """Stages ca/<identity>@<org_name>/{msp,tls} as the CA enrollment leaves it."""
    identity_dir = os.path.join(root, "ca", f"{identity}@{org_name}")
    stage_msp(os.path.join(identity_dir, "msp"), identity)
    if tls:
        stage_tls(os.path.join(identity_dir, "tls"), identity)
    return identity_dir


def stage_user(root, user_name, org_name):
    user_dir = os.path.join(root, "ca", f"{user_name}@{org_name}", "user")
    stage_msp(user_dir, user_name)
    return user_dir
