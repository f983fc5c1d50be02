"""
Templates of the cluster resources created for the development environment.
"""

IMAGESTREAM_TEMPLATE = """
apiVersion: image.openshift.io/v1
kind: ImageStream
metadata:
  name: {{ image.name | tojson }}
  labels:
    app: {{ app.name | tojson }}
spec:
  lookupPolicy:
    local: false
  tags:
  - name: {{ image.tag | tojson }}
{% if image.annotation_cmds %}
    annotations:
      cmds: {{ supervisord_cmds | tojson }}
{% endif %}
    from:
      kind: DockerImage
      name: "{{ image.repo }}:{{ image.tag }}"
    importPolicy: {}
    referencePolicy:
      type: Source
"""

SERVICE_TEMPLATE = """
apiVersion: v1
kind: Service
metadata:
  name: {{ app.name | tojson }}
  labels:
    app: {{ app.name | tojson }}
spec:
  ports:
  - name: http
    port: {{ app.port }}
    protocol: TCP
    targetPort: {{ app.port }}
  selector:
{% for key, value in selector.items() %}
    {{ key | tojson }}: {{ value | tojson }}
{% endfor %}
"""

ROUTE_TEMPLATE = """
apiVersion: route.openshift.io/v1
kind: Route
metadata:
  name: {{ app.name | tojson }}
  labels:
    app: {{ app.name | tojson }}
spec:
  port:
    targetPort: {{ app.port }}
  to:
    kind: Service
    name: {{ app.name | tojson }}
"""

DEPLOYMENTCONFIG_TEMPLATE = """
apiVersion: apps.openshift.io/v1
kind: DeploymentConfig
metadata:
  name: {{ app.name | tojson }}
  labels:
    app: {{ app.name | tojson }}
    {{ odo_label_name }}: {{ odo_label_value }}
spec:
  replicas: {{ app.replica }}
  selector:
    app: {{ app.name | tojson }}
    deploymentconfig: {{ app.name | tojson }}
  strategy:
    type: Rolling
    rollingParams:
      timeoutSeconds: 600
  template:
    metadata:
      labels:
        app: {{ app.name | tojson }}
        deploymentconfig: {{ app.name | tojson }}
    spec:
      initContainers:
      - name: {{ supervisord.name | tojson }}
        image: "{{ supervisord.name }}:{{ supervisord.tag }}"
        command: ["/usr/bin/cp"]
        args: ["-r", "/opt/supervisord", "/var/lib/"]
        volumeMounts:
        - name: shared-data
          mountPath: /var/lib/supervisord
      containers:
      - name: {{ app.name | tojson }}
        image: "{{ runtime.name }}:{{ runtime.tag }}"
        command: ["/var/lib/supervisord/bin/supervisord"]
        args: ["-c", "/var/lib/supervisord/conf/supervisor.conf"]
        env:
        - name: CMDS
          value: {{ supervisord_cmds | tojson }}
        - name: JAVA_APP_DIR
          value: /deployment
        - name: JAVA_DEBUG
          value: "false"
{% for var in app.env %}
        - name: {{ var.name | tojson }}
          value: {{ var.value | tojson }}
{% endfor %}
        ports:
        - containerPort: {{ app.port }}
          name: http
          protocol: TCP
        resources:
          limits:
            cpu: {{ app.cpu | tojson }}
            memory: {{ app.memory | tojson }}
        volumeMounts:
        - name: shared-data
          mountPath: /var/lib/supervisord
        - name: {{ m2_claim | tojson }}
          mountPath: /tmp/artifacts
      volumes:
      - name: shared-data
        emptyDir: {}
      - name: {{ m2_claim | tojson }}
        persistentVolumeClaim:
          claimName: {{ m2_claim | tojson }}
  triggers:
  - type: ConfigChange
  - type: ImageChange
    imageChangeParams:
      automatic: true
      containerNames:
      - {{ supervisord.name | tojson }}
      from:
        kind: ImageStreamTag
        name: "{{ supervisord.name }}:{{ supervisord.tag }}"
  - type: ImageChange
    imageChangeParams:
      automatic: true
      containerNames:
      - {{ app.name | tojson }}
      from:
        kind: ImageStreamTag
        name: "{{ runtime.name }}:{{ runtime.tag }}"
"""

TEMPLATES = {
    "imagestream": IMAGESTREAM_TEMPLATE,
    "service": SERVICE_TEMPLATE,
    "route": ROUTE_TEMPLATE,
    "deploymentconfig": DEPLOYMENTCONFIG_TEMPLATE,
}
